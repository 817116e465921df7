"""Copy-merge engine: writes header + original content to the destination container."""

from __future__ import annotations

import base64
import logging
import re
import uuid
from contextlib import closing

from headerprop.core.config import LEGACY_MARKER_PATTERN, AppSettings
from headerprop.core.exceptions import ConfigurationError, LeaseConflictError
from headerprop.core.protocols import IObjectStore
from headerprop.header.scanner import DEFAULT_CHUNK_SIZE, LineReader, PatternScanner, split_terminator
from headerprop.models.header import Header

logger = logging.getLogger(__name__)


def new_block_id() -> str:
    return base64.urlsafe_b64encode(str(uuid.uuid4()).encode("ascii")).decode("ascii")


class HeaderCopier:
    """Produces ``destination/<path>`` = [legacy marker] + missing header lines + source content.

    The destination object is published with a single block commit, so readers
    never see a partially written object. A destination object that already
    exists is never rewritten.
    """

    def __init__(self, store: IObjectStore, scanner: PatternScanner, *,
                 destination_container: str,
                 legacy_marker_pattern: str = LEGACY_MARKER_PATTERN,
                 encoding: str = "utf-8", chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._store = store
        self._scanner = scanner
        self._destination_container = destination_container
        self._legacy_marker = re.compile(legacy_marker_pattern)
        self._encoding = encoding
        self._chunk_size = chunk_size

    @classmethod
    def from_settings(cls, store: IObjectStore, scanner: PatternScanner,
                      settings: AppSettings) -> HeaderCopier:
        return cls(
            store,
            scanner,
            destination_container=settings.storage.destination_container,
            legacy_marker_pattern=settings.header.legacy_marker_pattern,
            encoding=settings.header.encoding,
            chunk_size=settings.header.read_chunk_size,
        )

    def _destination(self) -> str:
        if not self._destination_container:
            raise ConfigurationError("Destination container cannot be empty")
        return self._destination_container

    def _stage(self, container: str, path: str, data: bytes) -> str:
        block_id = new_block_id()
        self._store.stage_block(container, path, block_id, data)
        return block_id

    def copy_with_header(self, object_path: str, container_name: str, header: Header) -> None:
        destination = self._destination()
        source_header = self._scanner.scan(container_name, object_path)

        if self._store.exists(destination, object_path):
            logger.warning("Skipping copy of %s: object already exists in %s", object_path, destination)
            return

        lease_id: str | None = None
        try:
            lease_id = self._store.acquire_lease(container_name, object_path)
            logger.info("Lease %s acquired on %s/%s", lease_id, container_name, object_path)

            block_ids: list[str] = []
            if not source_header.is_propagatable:
                # line endings are ignored when matching existing lines
                already_present = {split_terminator(line)[0] for line in source_header.lines}
                missing = [
                    line for line in header.lines
                    if split_terminator(line)[0] not in already_present
                ]
                logger.info("Adding %d header line(s) to %s", len(missing), object_path)
                for line in missing:
                    block_ids.append(
                        self._stage(destination, object_path, line.encode(self._encoding))
                    )

            with closing(self._store.open_read(container_name, object_path)) as stream:
                reader = LineReader(stream, self._chunk_size)
                first_line = reader.readline()
                text, terminator = split_terminator(first_line.decode(self._encoding, errors="replace"))
                if first_line and self._legacy_marker.search(text):
                    marker = first_line if terminator else first_line + b"\n"
                    block_ids.insert(0, self._stage(destination, object_path, marker))
                    content = reader.read_rest()
                else:
                    content = first_line + reader.read_rest()

            block_ids.append(self._stage(destination, object_path, content))

            self._store.commit_blocks(destination, object_path, block_ids)
            logger.info("Committed %d block(s) into %s/%s", len(block_ids), destination, object_path)
        except LeaseConflictError:
            logger.warning("Lease on %s/%s held by another copy; skipping", container_name, object_path)
        except Exception:
            logger.exception("Copy of %s/%s failed", container_name, object_path)
            raise
        finally:
            if lease_id is not None:
                self._store.break_lease(container_name, object_path, lease_id)
