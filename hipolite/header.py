"""The file header at the start of every file, and per-record bookkeeping.

The header is 14 32-bit words:

    0  unique id          (HIPO: 0x43455248)
    1  file number
    2  header length      in words, usually 14
    3  record count
    4  index array length in bytes
    5  bit info (upper 24 bits) and version (lower 8 bits)
    6  user header length in bytes
    7  magic number       0xc0da0100
    8-9   user register   (64 bits)
    10-11 trailer position (64 bits)
    12 user integer 1
    13 user integer 2

If the magic number reads as 0x0001dac0 the file was written big-endian.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

__all__ = [
    "FileHeader",
    "RecordInfo",
    "HIPO_FILE_HEADER_SIZE",
    "HIPO_MAGIC",
    "HIPO_MAGIC_SWAPPED",
    "HIPO_UNIQUE_ID",
    "HEADER_WORDS",
]

HIPO_FILE_HEADER_SIZE = 72
HIPO_MAGIC = 0xC0DA0100
HIPO_MAGIC_SWAPPED = 0x0001DAC0
HIPO_UNIQUE_ID = 0x43455248
HEADER_WORDS = 14

_FIELDS = "iiiiiIiIqq"
_LITTLE = struct.Struct("<" + _FIELDS)
_BIG = struct.Struct(">" + _FIELDS)
_ENCODED_SIZE = HEADER_WORDS * 4


@dataclass
class FileHeader:
    """Parameters read from the file header."""

    unique_id: int = 0
    file_number: int = 0
    header_length: int = 0
    record_count: int = 0
    index_array_length: int = 0
    bit_info: int = 0
    version: int = 0
    user_header_length: int = 0
    magic_number: int = 0
    user_register: int = 0
    trailer_position: int = 0

    @property
    def big_endian(self) -> bool:
        """True if the header was written with big-endian byte order."""
        return self.magic_number == HIPO_MAGIC_SWAPPED

    @property
    def first_record_position(self) -> int:
        """Byte offset of the first record after the headers."""
        return 4 * self.header_length + self.user_header_length

    @classmethod
    def from_bytes(cls, data: bytes) -> "FileHeader":
        """Decode a header, swapping bytes if the file is big-endian."""
        if len(data) < _LITTLE.size:
            raise ValueError(
                f"file header needs at least {_LITTLE.size} bytes, got {len(data)}"
            )
        fields = _LITTLE.unpack_from(data, 0)
        magic = fields[7]
        if magic == HIPO_MAGIC_SWAPPED:
            fields = _BIG.unpack_from(data, 0)
        (
            unique_id,
            file_number,
            header_length,
            record_count,
            index_array_length,
            word,
            user_header_length,
            _magic,
            user_register,
            trailer_position,
        ) = fields
        return cls(
            unique_id=unique_id,
            file_number=file_number,
            header_length=header_length,
            record_count=record_count,
            index_array_length=index_array_length,
            bit_info=(word >> 8) & 0x00FFFFFF,
            version=word & 0xFF,
            user_header_length=user_header_length,
            magic_number=magic,
            user_register=user_register,
            trailer_position=trailer_position,
        )

    def to_bytes(self) -> bytes:
        """Encode the header as 14 words, in the byte order it was read in."""
        word = ((self.bit_info & 0x00FFFFFF) << 8) | (self.version & 0xFF)
        if self.big_endian:
            layout, magic = _BIG, HIPO_MAGIC
        else:
            layout, magic = _LITTLE, self.magic_number & 0xFFFFFFFF
        packed = layout.pack(
            self.unique_id,
            self.file_number,
            self.header_length,
            self.record_count,
            self.index_array_length,
            word,
            self.user_header_length,
            magic,
            self.user_register,
            self.trailer_position,
        )
        return packed + bytes(_ENCODED_SIZE - len(packed))


@dataclass
class RecordInfo:
    """Length, entry count, position and user words of one record."""

    record_length: int = 0
    record_entries: int = 0
    record_position: int = 0
    user_word_one: int = 0
    user_word_two: int = 0