"""A self-describing binary node: an 8-byte header followed by a payload.

The header holds a 16-bit group, an 8-bit item, an 8-bit type and a 32-bit
word whose top byte is the format length and whose low 24 bits are the node
length (format plus data). All values are little-endian.
"""

from __future__ import annotations

import struct

__all__ = ["Node"]

_HEADER = struct.Struct("<HBBI")
_WORD = struct.Struct("<I")
_MAX_NODE_LENGTH = 16777215


class Node:
    """A group/item tagged block of bytes with an optional format prefix."""

    def __init__(self, size: int = 0) -> None:
        self._buffer = bytearray()
        self.allocate(8 + size)

    def allocate(self, size: int) -> None:
        """Make sure the buffer holds at least ``size`` bytes."""
        if len(self._buffer) < size:
            self._buffer.extend(bytes(size + 8 - len(self._buffer)))

    def create(self, group: int, item: int, kind: int, size: int) -> None:
        """Write a fresh header with zero length into a buffer of ``size`` bytes."""
        self.allocate(size)
        _HEADER.pack_into(self._buffer, 0, group & 0xFFFF, item & 0xFF, kind & 0xFF, 0)

    def init(self, data: bytes) -> None:
        """Copy a complete node (header and payload) into this one."""
        self.allocate(len(data))
        self._buffer[: len(data)] = data
        self.notify()

    def init_empty(self) -> None:
        """Clear the header so the node reads as empty."""
        _HEADER.pack_into(self._buffer, 0, 0, 0, 0, 0)

    def reset(self) -> None:
        self.set_data_length(0)

    def _word(self) -> int:
        return _WORD.unpack_from(self._buffer, 4)[0]

    def _set_word(self, word: int) -> None:
        _WORD.pack_into(self._buffer, 4, word & 0xFFFFFFFF)

    def node_length(self) -> int:
        """Length of format plus data, in bytes."""
        return self._word() & 0x00FFFFFF

    def set_node_length(self, size: int) -> None:
        if size >= _MAX_NODE_LENGTH:
            raise ValueError(
                f"node length {size} exceeds the limit of {_MAX_NODE_LENGTH}"
            )
        self._set_word((self._word() & 0xFF000000) | (size & 0x00FFFFFF))

    @property
    def capacity(self) -> int:
        return len(self._buffer)

    def format_length(self) -> int:
        return (self._word() >> 24) & 0xFF

    def set_format_length(self, length: int) -> None:
        """Set the format length; the node length becomes the format length."""
        if length >= 128:
            raise ValueError(f"format length can not exceed 128, got {length}")
        self._set_word(((length << 24) & 0xFF000000) | (length & 0x00FFFFFF))

    def data_length(self) -> int:
        return self.node_length() - self.format_length()

    def set_data_length(self, length: int) -> None:
        self.set_node_length(self.format_length() + length)

    def data_offset(self) -> int:
        """Position in the buffer where the data (after the format) begins."""
        return 8 + self.format_length()

    @property
    def group(self) -> int:
        return _HEADER.unpack_from(self._buffer, 0)[0]

    @property
    def item(self) -> int:
        return _HEADER.unpack_from(self._buffer, 0)[1]

    @property
    def kind(self) -> int:
        return _HEADER.unpack_from(self._buffer, 0)[2]

    @property
    def buffer(self) -> bytearray:
        """The underlying buffer, header first."""
        return self._buffer

    def show(self) -> str:
        return (
            "hipo::node : [%5d,%5d] type = %4d, node length = %5d, "
            "format length = %6d, data length = %8d, offset = %5d, capacity = %8d"
            % (
                self.group,
                self.item,
                self.kind,
                self.node_length(),
                self.format_length(),
                self.data_length(),
                self.data_offset(),
                self.capacity,
            )
        )

    def _get(self, fmt: str, index: int):
        return struct.unpack_from(fmt, self._buffer, index + self.data_offset())[0]

    def _put(self, fmt: str, index: int, value) -> None:
        struct.pack_into(fmt, self._buffer, index + self.data_offset(), value)

    def get_int_at(self, index: int) -> int:
        return self._get("<i", index)

    def get_short_at(self, index: int) -> int:
        return self._get("<h", index)

    def get_byte_at(self, index: int) -> int:
        return self._get("<b", index)

    def get_float_at(self, index: int) -> float:
        return self._get("<f", index)

    def get_double_at(self, index: int) -> float:
        return self._get("<d", index)

    def get_long_at(self, index: int) -> int:
        return self._get("<q", index)

    def put_int_at(self, index: int, value: int) -> None:
        self._put("<I", index, int(value) & 0xFFFFFFFF)

    def put_short_at(self, index: int, value: int) -> None:
        self._put("<H", index, int(value) & 0xFFFF)

    def put_byte_at(self, index: int, value: int) -> None:
        self._put("<B", index, int(value) & 0xFF)

    def put_float_at(self, index: int, value: float) -> None:
        self._put("<f", index, float(value))

    def put_double_at(self, index: int, value: float) -> None:
        self._put("<d", index, float(value))

    def put_long_at(self, index: int, value: int) -> None:
        self._put("<Q", index, int(value) & 0xFFFFFFFFFFFFFFFF)

    def notify(self) -> None:
        """Called after the buffer is replaced; subclasses rebuild derived state."""