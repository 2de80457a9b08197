"""Shared fixtures for host probe tests.

Binary record builders and a fixed reference clock are defined here so the
reader, normalizer and login tests agree on one layout.
"""

from datetime import datetime, timezone

import pytest

from system.host_probe.wtmp.layout import RECORD_STRUCT, RecordType
from system.host_probe.wtmp.reader import RawRecord

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixture providing a fixed, timezone-aware reference instant."""
    return NOW


@pytest.fixture
def record_fields():
    """Fixture providing default field values for one USER_PROCESS record."""
    return {
        "type": int(RecordType.USER_PROCESS),
        "pid": 4242,
        "line": b"pts/0",
        "id": b"ts/0",
        "user": b"alice",
        "host": b"10.0.0.5",
        "termination": 0,
        "exit": 0,
        "session": 77,
        "tv_sec": int(NOW.timestamp()),
        "tv_usec": 123456,
        "addr": (0x0500000A, 0, 0, 0),
    }


@pytest.fixture
def pack_record(record_fields):
    """Fixture providing a function that packs one on-disk record.

    Keyword arguments override the defaults from ``record_fields``.
    """

    def _pack(**overrides) -> bytes:
        fields = {**record_fields, **overrides}
        return RECORD_STRUCT.pack(
            fields["type"],
            fields["pid"],
            fields["line"],
            fields["id"],
            fields["user"],
            fields["host"],
            fields["termination"],
            fields["exit"],
            fields["session"],
            fields["tv_sec"],
            fields["tv_usec"],
            *fields["addr"],
        )

    return _pack


@pytest.fixture
def make_raw_record(record_fields):
    """Fixture providing a function that builds a RawRecord with full-width fields."""

    def _make(**overrides) -> RawRecord:
        fields = {**record_fields, **overrides}
        return RawRecord(
            type=fields["type"],
            pid=fields["pid"],
            line=fields["line"].ljust(32, b"\x00"),
            id=fields["id"],
            user=fields["user"].ljust(32, b"\x00"),
            host=fields["host"].ljust(256, b"\x00"),
            termination=fields["termination"],
            exit=fields["exit"],
            session=fields["session"],
            tv_sec=fields["tv_sec"],
            tv_usec=fields["tv_usec"],
            addr=tuple(fields["addr"]),
        )

    return _make
