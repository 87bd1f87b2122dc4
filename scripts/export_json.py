#!/usr/bin/env python3
"""Export results/games.db to JSON and upload it to an S3-compatible bucket.

Requires env vars:
    S3_KEY_ID
    S3_APPLICATION_KEY
    S3_BUCKET_NAME
    S3_ENDPOINT_URL
"""

import os
import sys
import tempfile
from pathlib import Path

DB_PATH = Path(os.environ.get("SNAKES_LADDERS_DB", "results/games.db"))

REQUIRED_VARS = (
    "S3_KEY_ID",
    "S3_APPLICATION_KEY",
    "S3_BUCKET_NAME",
    "S3_ENDPOINT_URL",
)


def main() -> None:
    for var in REQUIRED_VARS:
        if not os.environ.get(var):
            print(f"Missing env var: {var}", file=sys.stderr)
            sys.exit(1)

    if not DB_PATH.exists():
        print(f"No database at {DB_PATH}. Run some games first.", file=sys.stderr)
        sys.exit(1)

    from snakes_ladders.export import generate_all, upload_to_s3

    with tempfile.TemporaryDirectory() as tmp:
        out_dir = Path(tmp)
        generated = generate_all(DB_PATH, out_dir)
        print(f"Generated {len(generated)} JSON files")

        # Object key -> file bytes
        files: dict[str, bytes] = {}
        for path in generated:
            key = "data/" + str(path.relative_to(out_dir))
            files[key] = path.read_bytes()

        upload_to_s3(
            files=files,
            bucket_name=os.environ["S3_BUCKET_NAME"],
            endpoint_url=os.environ["S3_ENDPOINT_URL"],
            key_id=os.environ["S3_KEY_ID"],
            app_key=os.environ["S3_APPLICATION_KEY"],
        )
        print(f"Uploaded {len(files)} files")


if __name__ == "__main__":
    main()
