"""Generate a game-length histogram from recorded games."""

from __future__ import annotations

import matplotlib
matplotlib.use("Agg")  # non-interactive backend

import matplotlib.pyplot as plt


def make_length_chart(
    turn_counts: list[int],
    output_path: str = "game_lengths.png",
    title: str = "Snakes & Ladders Game Length",
) -> str:
    """Create a histogram of rolls-per-game with the mean marked.

    Returns the path to the saved PNG.
    """
    if not turn_counts:
        raise ValueError("No games to chart.")

    fig, ax = plt.subplots(figsize=(10, 5))
    bins = min(50, max(1, max(turn_counts) - min(turn_counts) + 1))
    ax.hist(turn_counts, bins=bins, color="#4A90D9", edgecolor="white")

    mean = sum(turn_counts) / len(turn_counts)
    ax.axvline(mean, color="#D9534F", linestyle="--", linewidth=2)
    ax.text(
        mean, ax.get_ylim()[1] * 0.95, f" mean {mean:.1f}",
        color="#D9534F", fontsize=11, fontweight="bold", va="top",
    )

    ax.set_xlabel("Rolls per game")
    ax.set_ylabel("Games")
    ax.set_title(title, fontsize=14, fontweight="bold")

    plt.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
