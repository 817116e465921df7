"""Unit test fixtures: in-memory store and a three-pattern header."""

from __future__ import annotations

import re

import pytest

from headerprop.core.config import AppSettings, HeaderConfig, StorageConfig
from headerprop.header.copier import HeaderCopier
from headerprop.header.scanner import PatternScanner
from headerprop.models.header import Header
from tests.fakes import MemoryObjectStore
from tests.fakes.samples import DEST, HEADER_LINES, PATTERNS, SOURCE


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        header=HeaderConfig(patterns=PATTERNS),
        storage=StorageConfig(source_container=SOURCE, destination_container=DEST),
    )


@pytest.fixture
def store() -> MemoryObjectStore:
    return MemoryObjectStore()


@pytest.fixture
def scanner(store) -> PatternScanner:
    return PatternScanner(store, [re.compile(p) for p in PATTERNS.values()])


@pytest.fixture
def copier(store, scanner) -> HeaderCopier:
    return HeaderCopier(store, scanner, destination_container=DEST)


@pytest.fixture
def full_header() -> Header:
    return Header(lines=HEADER_LINES, is_complete=True)
