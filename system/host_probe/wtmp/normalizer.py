"""Conversion of raw utmp/wtmp records into typed login records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from system.host_probe.wtmp.reader import RawRecord


def decode_cstring(buf: bytes, *, keep_unterminated: bool = False) -> str:
    """Decode a NUL-terminated fixed-width byte field.

    The string ends at the first NUL. A buffer with no NUL at all decodes to
    an empty string unless ``keep_unterminated`` is set, in which case the
    whole buffer is used.

    Args:
        buf: Fixed-width field bytes.
        keep_unterminated: Use the full buffer when no NUL is present.

    Returns:
        Decoded text (undecodable bytes become U+FFFD).
    """
    end = buf.find(b"\x00")
    if end == -1:
        end = len(buf) if keep_unterminated else 0
    return buf[:end].decode("utf-8", errors="replace")


@dataclass(frozen=True)
class IPv4LoginAddress:
    """IPv4 peer address stored in the first address word."""

    word: int

    @property
    def octets(self) -> tuple[int, int, int, int]:
        return tuple((self.word >> (8 * i)) & 0xFF for i in range(4))

    def __str__(self) -> str:
        return ".".join(str(octet) for octet in self.octets)


@dataclass(frozen=True)
class IPv6ShapedLoginAddress:
    """Address spread over all four words, rendered as eight hextets.

    Each word contributes its low 16 bits then its high 16 bits. Hextets are
    lowercase and unpadded, with no ``::`` compression.
    """

    words: tuple[int, int, int, int]

    @property
    def hextets(self) -> tuple[int, ...]:
        out = []
        for word in self.words:
            out.append(word & 0xFFFF)
            out.append((word >> 16) & 0xFFFF)
        return tuple(out)

    def __str__(self) -> str:
        return ":".join(f"{hextet:x}" for hextet in self.hextets)


LoginAddress = IPv4LoginAddress | IPv6ShapedLoginAddress


def decode_address(words: tuple[int, int, int, int]) -> LoginAddress:
    """Pick the address variant: IPv4 when words 2-4 are all zero."""
    words = tuple(word & 0xFFFFFFFF for word in words)
    if words[1] == 0 and words[2] == 0 and words[3] == 0:
        return IPv4LoginAddress(words[0])
    return IPv6ShapedLoginAddress(words)


@dataclass(frozen=True)
class NormalizedRecord:
    """A login record with text fields, a UTC timestamp and a typed address.

    Attributes:
        type: ``ut_type`` value (see ``RecordType``).
        pid: Process id of the login process.
        device: Terminal line, e.g. ``pts/0``.
        line_id: Terminal suffix / inittab id.
        user: User name.
        host: Remote host name, or ``host:display`` for X sessions.
        exit: (termination signal, exit code) of a dead process.
        session: Session id.
        timestamp: Event time, second resolution, UTC.
        address: Remote peer address.
    """

    type: int
    pid: int
    device: str
    line_id: str
    user: str
    host: str
    exit: tuple[int, int]
    session: int
    timestamp: datetime
    address: LoginAddress

    @property
    def address_text(self) -> str:
        return str(self.address)


def normalize(raw: RawRecord) -> NormalizedRecord:
    """Convert a RawRecord into a NormalizedRecord.

    Microseconds are discarded; ``tv_sec`` is read as seconds since the Unix
    epoch in UTC.
    """
    return NormalizedRecord(
        type=int(raw.type),
        pid=int(raw.pid),
        device=decode_cstring(raw.line),
        line_id=decode_cstring(raw.id),
        user=decode_cstring(raw.user),
        host=decode_cstring(raw.host),
        exit=(int(raw.termination), int(raw.exit)),
        session=int(raw.session),
        timestamp=datetime.fromtimestamp(raw.tv_sec, tz=timezone.utc),
        address=decode_address(raw.addr),
    )
