"""Sequential decoder for fixed-size utmp/wtmp records.

The file is a plain concatenation of records with no header or delimiters:
record *n* starts at byte ``n * RECORD_SIZE``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from infrastructure.logging.logger import get_logger
from system.host_probe.errors import TruncatedRecordError
from system.host_probe.wtmp.layout import RECORD_SIZE, RECORD_STRUCT

logger = get_logger("WtmpReader")


@dataclass(frozen=True)
class RawRecord:
    """One record exactly as stored on disk.

    Byte fields keep their full fixed width, NUL padding included.
    """

    type: int
    pid: int
    line: bytes
    id: bytes
    user: bytes
    host: bytes
    termination: int
    exit: int
    session: int
    tv_sec: int
    tv_usec: int
    addr: tuple[int, int, int, int]

    @classmethod
    def unpack(cls, buf: bytes) -> RawRecord:
        """Decode one record from exactly ``RECORD_SIZE`` bytes."""
        (
            rec_type,
            pid,
            line,
            rec_id,
            user,
            host,
            termination,
            exit_code,
            session,
            tv_sec,
            tv_usec,
            *addr,
        ) = RECORD_STRUCT.unpack(buf)
        return cls(
            type=rec_type,
            pid=pid,
            line=line,
            id=rec_id,
            user=user,
            host=host,
            termination=termination,
            exit=exit_code,
            session=session,
            tv_sec=tv_sec,
            tv_usec=tv_usec,
            addr=tuple(addr),
        )


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    # Raw and non-blocking streams may return fewer bytes than asked for
    # before EOF; keep reading until size bytes or EOF.
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def iter_records(stream: BinaryIO, record_size: int = RECORD_SIZE) -> Iterator[RawRecord]:
    """Lazily decode records from ``stream`` until end of stream.

    The iterator consumes the stream and cannot be restarted.

    Args:
        stream: Binary file-like object positioned at a record boundary.
        record_size: Size of one record; only the native layout is supported.

    Yields:
        One RawRecord per complete record.

    Raises:
        TruncatedRecordError: The stream ended part-way through a record, after
            all complete records were yielded.
        ValueError: ``record_size`` does not match the record layout.
        OSError: The underlying read failed.
    """
    if record_size != RECORD_STRUCT.size:
        raise ValueError(f"record_size must be {RECORD_STRUCT.size}, got {record_size}")

    count = 0
    while True:
        buf = _read_exact(stream, record_size)
        if not buf:
            return
        if len(buf) < record_size:
            raise TruncatedRecordError(count, len(buf), record_size)
        count += 1
        yield RawRecord.unpack(buf)


def read_records(path: str | Path) -> list[RawRecord]:
    """Read every complete record from the file at ``path``.

    A truncated final record is logged and dropped; records before it are
    returned. The file is closed on every exit path.

    Raises:
        OSError: The file could not be opened or read.
    """
    records: list[RawRecord] = []
    with open(path, "rb") as f:
        try:
            for record in iter_records(f):
                records.append(record)
        except TruncatedRecordError as e:
            logger.warning(f"{path}: {e}")
    logger.debug(f"Read {len(records)} records from {path}")
    return records
