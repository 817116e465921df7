"""End-to-end propagation against LocalStack S3 and Redis."""

from __future__ import annotations

import asyncio
import uuid

import pytest

from headerprop.core.config import AppSettings, HeaderConfig, RedisConfig, StorageConfig
from headerprop.header.cache import HeaderStatusStore
from headerprop.models.events import ObjectCreatedNotification, ObjectLocation
from headerprop.orchestration.orchestrator import PropagationOrchestrator
from headerprop.persistence import create_persistence
from tests.integration.conftest import LOCALSTACK_URL, REDIS_HOST, skip_no_localstack

HEADER = "LICENSE: MIT\nAUTHOR: Jane\n"


@pytest.mark.integration
@skip_no_localstack
class TestPropagationIntegration:
    @pytest.fixture
    def settings(self, containers):
        source, destination = containers
        return AppSettings(
            header=HeaderConfig(patterns={"license": "^LICENSE:", "author": "^AUTHOR:"}),
            storage=StorageConfig(
                source_container=source,
                destination_container=destination,
                endpoint_url=LOCALSTACK_URL,
            ),
            redis=RedisConfig(host=REDIS_HOST, key_prefix=f"hp-it-{uuid.uuid4().hex[:8]}:"),
        )

    def test_fan_out(self, settings, localstack_s3):
        source = settings.storage.source_container
        destination = settings.storage.destination_container
        localstack_s3.put_object(Bucket=source, Key="docs/head.txt", Body=(HEADER + "a\n").encode())
        localstack_s3.put_object(Bucket=source, Key="docs/body.txt", Body=b"b\n")

        store, cache = create_persistence(settings)
        orchestrator = PropagationOrchestrator.from_settings(
            settings, store=store, cache=HeaderStatusStore(cache),
        )
        notification = ObjectCreatedNotification(
            location=ObjectLocation(container=source, path="docs/head.txt"),
        )
        asyncio.run(orchestrator.run([notification]))

        body = localstack_s3.get_object(Bucket=destination, Key="docs/body.txt")["Body"].read()
        assert body.decode() == HEADER + "b\n"
        keys = [o["Key"] for o in localstack_s3.list_objects_v2(Bucket=destination)["Contents"]]
        assert sorted(keys) == ["docs/body.txt", "docs/head.txt"]
