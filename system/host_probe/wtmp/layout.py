"""On-disk layout of utmp/wtmp login records.

Matches the glibc ``struct utmp`` used on x86_64 and most 64-bit Linux
platforms (see ``man 5 utmp``)::

    offset  size  field
         0     2  ut_type        int16
         2     2  (padding)
         4     4  ut_pid         int32
         8    32  ut_line        char[32]
        40     4  ut_id          char[4]
        44    32  ut_user        char[32]
        76   256  ut_host        char[256]
       332     4  ut_exit        int16 e_termination, int16 e_exit
       336     4  ut_session     int32
       340     8  ut_tv          int32 tv_sec, int32 tv_usec
       348    16  ut_addr_v6     4 x 32-bit words
       364    20  __glibc_reserved
"""

import struct
from enum import IntEnum

# Records are read with the byte order of the common producer (little-endian).
# Logs copied from a big-endian host decode to garbage; this is not detected.
BYTE_ORDER = "<"

LINE_SIZE = 32
ID_SIZE = 4
NAME_SIZE = 32
HOST_SIZE = 256
ADDR_WORDS = 4
RESERVED_SIZE = 20

RECORD_FORMAT = (
    f"{BYTE_ORDER}"
    "h2x"  # type + alignment
    "i"  # pid
    f"{LINE_SIZE}s"
    f"{ID_SIZE}s"
    f"{NAME_SIZE}s"
    f"{HOST_SIZE}s"
    "hh"  # exit status
    "i"  # session
    "ii"  # tv_sec, tv_usec
    f"{ADDR_WORDS}I"
    f"{RESERVED_SIZE}x"
)
RECORD_STRUCT = struct.Struct(RECORD_FORMAT)
RECORD_SIZE = RECORD_STRUCT.size


class RecordType(IntEnum):
    """Values of ``ut_type``."""

    EMPTY = 0
    RUN_LVL = 1
    BOOT_TIME = 2
    NEW_TIME = 3
    OLD_TIME = 4
    INIT_PROCESS = 5
    LOGIN_PROCESS = 6
    USER_PROCESS = 7
    DEAD_PROCESS = 8
    ACCOUNTING = 9
