"""Tests for the Header value object."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from headerprop.models.header import Header


def test_default_header_is_empty():
    header = Header()
    assert header.lines == ()
    assert not header.has_header
    assert not header.is_complete
    assert not header.is_partial


def test_partial_header():
    header = Header(lines=["LICENSE: MIT\n"])
    assert header.has_header
    assert header.is_partial
    assert not header.is_propagatable


def test_complete_header_is_propagatable(full_header):
    assert full_header.is_propagatable
    assert not full_header.is_partial


def test_header_is_frozen(full_header):
    with pytest.raises(ValidationError):
        full_header.is_complete = False


def test_json_round_trip_keeps_terminators():
    header = Header(lines=["A\r\n", "B\n"], is_complete=True)
    assert Header.model_validate_json(header.model_dump_json()).lines == ("A\r\n", "B\n")


def test_lines_cannot_be_mutated_in_place(full_header):
    assert isinstance(full_header.lines, tuple)
    with pytest.raises(AttributeError):
        full_header.lines.append("EXTRA\n")
