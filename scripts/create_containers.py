"""Create the source and destination buckets for local development.

Usage:
    python scripts/create_containers.py --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
from typing import Any

import boto3

from headerprop.core.config import StorageConfig


def create_containers(s3: Any, names: list[str], region: str = "us-east-1") -> None:
    """Create each bucket. Skips buckets that already exist."""
    existing = {b["Name"] for b in s3.list_buckets().get("Buckets", [])}

    for name in names:
        if name in existing:
            print(f"  Bucket {name} already exists, skipping")
            continue
        kwargs: dict[str, Any] = {"Bucket": name}
        if region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
        s3.create_bucket(**kwargs)
        print(f"  Created bucket {name}")


def main() -> None:
    config = StorageConfig()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--endpoint-url", default=config.endpoint_url)
    parser.add_argument("--region", default=config.region)
    parser.add_argument("--source", default=config.source_container or "headerprop-source")
    parser.add_argument("--destination", default=config.destination_container or "headerprop-destination")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url
    s3 = boto3.client("s3", **kwargs)

    print("Creating buckets...")
    create_containers(s3, [args.source, args.destination], region=args.region)
    print("Done.")


if __name__ == "__main__":
    main()
