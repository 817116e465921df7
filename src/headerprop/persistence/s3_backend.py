"""S3 object storage backend implementing IObjectStore.

Blocks are staged as objects under ``<staging_prefix><path>/<block_id>`` in the
target bucket and concatenated into the final key on commit. Leases are tokens
held in an ILeaseBackend since S3 has no native object leases.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterator

import boto3
from botocore.exceptions import ClientError

from headerprop.core.exceptions import LeaseConflictError, ObjectStoreError
from headerprop.core.protocols import ILeaseBackend

logger = logging.getLogger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}
_DELETE_BATCH = 1000


class S3ObjectStore:
    """Production IObjectStore backed by S3."""

    def __init__(self, *, leases: ILeaseBackend, region: str = "us-east-1",
                 endpoint_url: str | None = None, staging_prefix: str = ".staging/") -> None:
        self._region = region
        self._endpoint_url = endpoint_url
        self._staging_prefix = staging_prefix
        self._leases = leases
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    def _staging_key(self, path: str, block_id: str) -> str:
        return f"{self._staging_prefix}{path}/{block_id}"

    # ---- reads ----

    def open_read(self, container: str, path: str) -> BinaryIO:
        try:
            resp = self._client.get_object(Bucket=container, Key=path)
            return resp["Body"]
        except ClientError as exc:
            raise ObjectStoreError(f"S3 read failed for {container}/{path}: {exc}") from exc

    def exists(self, container: str, path: str) -> bool:
        try:
            self._client.head_object(Bucket=container, Key=path)
            return True
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_CODES:
                return False
            raise ObjectStoreError(f"S3 head failed for {container}/{path}: {exc}") from exc

    def list_objects(self, container: str, prefix: str) -> Iterator[str]:
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=container, Prefix=prefix):
                for obj in page.get("Contents", []):
                    if obj["Key"].startswith(self._staging_prefix):
                        continue
                    yield obj["Key"]
        except ClientError as exc:
            raise ObjectStoreError(f"S3 list failed for {container}/{prefix!r}: {exc}") from exc

    # ---- two-phase writes ----

    def stage_block(self, container: str, path: str, block_id: str, data: bytes) -> None:
        try:
            self._client.put_object(
                Bucket=container, Key=self._staging_key(path, block_id), Body=data,
            )
        except ClientError as exc:
            raise ObjectStoreError(
                f"S3 stage block {block_id} failed for {container}/{path}: {exc}"
            ) from exc

    def commit_blocks(self, container: str, path: str, block_ids: list[str]) -> None:
        staged = [self._staging_key(path, block_id) for block_id in block_ids]
        try:
            parts = [
                self._client.get_object(Bucket=container, Key=key)["Body"].read()
                for key in staged
            ]
            self._client.put_object(Bucket=container, Key=path, Body=b"".join(parts))
        except ClientError as exc:
            raise ObjectStoreError(f"S3 commit failed for {container}/{path}: {exc}") from exc

        for start in range(0, len(staged), _DELETE_BATCH):
            batch = staged[start:start + _DELETE_BATCH]
            try:
                self._client.delete_objects(
                    Bucket=container,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
                )
            except ClientError as exc:
                # object is already published at this point
                logger.warning("Could not remove staged blocks for %s/%s: %s", container, path, exc)

    # ---- leases ----

    def acquire_lease(self, container: str, path: str, duration: int | None = None) -> str:
        lease_id = self._leases.acquire(f"{container}/{path}", ttl=duration)
        if lease_id is None:
            raise LeaseConflictError(container, path)
        return lease_id

    def break_lease(self, container: str, path: str, lease_id: str | None = None) -> None:
        self._leases.release(f"{container}/{path}")
