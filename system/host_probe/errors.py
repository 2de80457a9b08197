"""Exceptions raised by host probe components."""


class HostProbeError(Exception):
    """Base class for probe errors."""


class TruncatedRecordError(HostProbeError):
    """A fixed-size record stream ended part-way through a record.

    Attributes:
        records_read: Complete records decoded before the short read.
        trailing_bytes: Number of bytes in the incomplete record.
        record_size: Expected size of one record.
    """

    def __init__(self, records_read: int, trailing_bytes: int, record_size: int) -> None:
        self.records_read = records_read
        self.trailing_bytes = trailing_bytes
        self.record_size = record_size
        super().__init__(
            f"truncated record after {records_read} records: "
            f"got {trailing_bytes} of {record_size} bytes"
        )


class UnknownProcessStateError(HostProbeError):
    """``ps`` reported a state code the tally does not recognise."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"unknown process state [ {code} ]")
