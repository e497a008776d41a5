"""Raw structures and self-describing composite nodes.

A structure is an 8-byte header (16-bit group, 8-bit item, 8-bit type and a
32-bit word holding the header size in its top byte and the total size in
its low 24 bits) followed by its payload. A composite is a node whose
format string, stored after the header, describes the columns of its rows.
"""

from __future__ import annotations

import struct

from .dictionary import type_size
from .node import Node

__all__ = ["Structure", "Composite"]

_HEADER = struct.Struct("<HBBI")
_WORD = struct.Struct("<I")
_DATA_OFFSET = 8
_STRING_TYPE = 6
_COMPOSITE_TYPE = 10

_FORMAT_CODES = {"b": 1, "s": 2, "i": 3, "f": 4, "d": 5, "l": 8}


class Structure:
    """A group/item tagged block of bytes with an 8-byte header."""

    def __init__(self, size: int = 0) -> None:
        self._buffer = bytearray()
        self.allocate(max(size, _DATA_OFFSET))

    @classmethod
    def from_string(cls, group: int, item: int, text: str) -> "Structure":
        """Create a string structure (type 6) holding ``text``."""
        data = text.encode("utf-8")
        result = cls()
        result.init_by_size(group, item, _STRING_TYPE, len(data))
        result.put_string(text)
        return result

    def allocate(self, size: int) -> None:
        """Make sure the buffer holds at least ``size`` bytes."""
        if len(self._buffer) < size:
            self._buffer.extend(bytes(size + 32 - len(self._buffer)))

    def init_by_size(self, group: int, item: int, kind: int, size: int) -> None:
        """Write a header for a payload of ``size`` bytes, growing the buffer."""
        self.allocate(size + _DATA_OFFSET)
        _HEADER.pack_into(
            self._buffer, 0, group & 0xFFFF, item & 0xFF, kind & 0xFF, size & 0xFFFFFFFF
        )

    def init(self, data: bytes) -> None:
        """Copy a complete structure (header and payload) into this one."""
        self.allocate(len(data))
        self._buffer[: len(data)] = data

    def _word(self) -> int:
        return _WORD.unpack_from(self._buffer, 4)[0]

    def _set_word(self, word: int) -> None:
        _WORD.pack_into(self._buffer, 4, word & 0xFFFFFFFF)

    def size(self) -> int:
        """Total payload length (header part plus data), in bytes."""
        return self._word() & 0x00FFFFFF

    def header_size(self) -> int:
        return (self._word() >> 24) & 0xFF

    def data_size(self) -> int:
        return self.size() - self.header_size()

    def set_size(self, size: int) -> None:
        self._set_word((self._word() & 0xFF000000) | (size & 0x00FFFFFF))

    def set_header_size(self, size: int) -> None:
        self._set_word(((size << 24) & 0xFF000000) | (self._word() & 0x00FFFFFF))

    def set_data_size(self, size: int) -> None:
        word = self._word()
        total = self.header_size() + size
        self._set_word((word & 0xFF000000) | (total & 0x00FFFFFF))

    @property
    def kind(self) -> int:
        return _HEADER.unpack_from(self._buffer, 0)[2]

    @property
    def group(self) -> int:
        return _HEADER.unpack_from(self._buffer, 0)[0]

    @property
    def item(self) -> int:
        return _HEADER.unpack_from(self._buffer, 0)[1]

    @property
    def buffer(self) -> bytearray:
        """The underlying buffer, header first."""
        return self._buffer

    def show(self) -> str:
        return (
            "structure : [%5d,%5d] type = %4d, header = %5d, length = %6d, "
            "data size = %5d, offset = %5d, capacity = %5d"
            % (
                self.group,
                self.item,
                self.kind,
                self.header_size(),
                self.size(),
                self.data_size(),
                _DATA_OFFSET,
                len(self._buffer),
            )
        )

    def _get(self, fmt: str, index: int):
        return struct.unpack_from(fmt, self._buffer, index + _DATA_OFFSET)[0]

    def _put(self, fmt: str, index: int, value) -> None:
        struct.pack_into(fmt, self._buffer, index + _DATA_OFFSET, value)

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

    def get_string(self) -> str:
        """Decode the payload as text, stopping at the first NUL byte."""
        raw = bytes(self._buffer[_DATA_OFFSET : _DATA_OFFSET + self.size()])
        return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")

    def put_string(self, text: str) -> None:
        """Write ``text`` at the start of the payload; the size is left as is."""
        data = text.encode("utf-8")
        self.allocate(_DATA_OFFSET + len(data))
        self._buffer[_DATA_OFFSET : _DATA_OFFSET + len(data)] = data

    def notify(self) -> None:
        """Called after the buffer is replaced; subclasses rebuild derived state."""


class Composite(Node):
    """A node of type 10 whose rows are laid out by a format string.

    Format characters: b (byte), s (short), i (int), f (float), d (double),
    l (long). Other characters are kept in the format but describe no column.
    """

    def __init__(
        self, group: int = 0, item: int = 0, fmt: str = "", capacity: int = 0
    ) -> None:
        super().__init__()
        self._types: list[int] = []
        self._offsets: list[int] = []
        self._row_offset = 0
        if fmt:
            self.parse(fmt, group, item, capacity)

    def _layout(self, fmt: str) -> None:
        self._types = []
        self._offsets = []
        offset = 0
        for char in fmt:
            kind = _FORMAT_CODES.get(char)
            if kind is None:
                continue
            self._types.append(kind)
            self._offsets.append(offset)
            offset += type_size(kind)
        self._row_offset = offset

    def parse(
        self, fmt: str, group: int = 134, item: int = 1, maxrows: int = 256
    ) -> None:
        """Lay out columns from ``fmt`` and size the node for ``maxrows`` rows."""
        encoded = fmt.encode("ascii")
        self._layout(fmt)
        length = len(encoded)
        self.create(group, item, _COMPOSITE_TYPE, self._row_offset * maxrows + 8 + length)
        self.set_format_length(length)
        self.buffer[8 : 8 + length] = encoded

    def rows(self) -> int:
        """Number of rows currently stored."""
        if self._row_offset == 0:
            return 0
        return self.data_length() // self._row_offset

    def entries(self) -> int:
        return len(self._offsets)

    def entry_type(self, index: int) -> int:
        return self._types[index]

    def set_rows(self, rows: int) -> None:
        """Set the number of rows; raise ValueError if they do not fit."""
        needed = self.format_length() + 8 + self._row_offset * rows
        if needed > self.capacity:
            raise ValueError(
                f"the requested row {rows} exceeds the bank capacity of {self.capacity}"
            )
        self.set_data_length(rows * self._row_offset)

    def row_size(self) -> int:
        return self._row_offset

    def _check_row(self, row: int) -> None:
        rows = self.rows()
        if row >= rows:
            raise IndexError(f"requested row {row} out of {rows}")

    def _position(self, element: int, row: int) -> int:
        return self._row_offset * row + self._offsets[element]

    def get_int(self, element: int, row: int) -> int:
        kind = self._types[element]
        self._check_row(row)
        offset = self._position(element, row)
        if kind == 1:
            return self.get_byte_at(offset)
        if kind == 2:
            return self.get_short_at(offset)
        if kind == 3:
            return self.get_int_at(offset)
        raise TypeError(f"column {element} has type {kind}, not an integer type")

    def get_long(self, element: int, row: int) -> int:
        self._check_row(row)
        return self.get_long_at(self._position(element, row))

    def get_float(self, element: int, row: int) -> float:
        self._check_row(row)
        return self.get_float_at(self._position(element, row))

    def _grow_to(self, row: int) -> None:
        if row >= self.rows():
            self.set_rows(row + 1)

    def put_int(self, element: int, row: int, value: int) -> None:
        kind = self._types[element]
        if kind not in (1, 2, 3):
            raise TypeError(f"column {element} has type {kind}, not an integer type")
        self._grow_to(row)
        offset = self._position(element, row)
        if kind == 1:
            self.put_byte_at(offset, value)
        elif kind == 2:
            self.put_short_at(offset, value)
        else:
            self.put_int_at(offset, value)

    def put_long(self, element: int, row: int, value: int) -> None:
        self._grow_to(row)
        self.put_long_at(self._position(element, row), value)

    def put_float(self, element: int, row: int, value: float) -> None:
        kind = self._types[element]
        if kind != 4:
            raise TypeError(f"column {element} has type {kind}, not float")
        self._grow_to(row)
        self.put_float_at(self._position(element, row), value)

    def _format(self) -> str:
        length = self.format_length()
        return bytes(self.buffer[8 : 8 + length]).decode("ascii", errors="replace")

    def notify(self) -> None:
        """Rebuild the column layout from the format stored in the buffer."""
        self._layout(self._format())

    def describe(self) -> str:
        """Human-readable dump of the layout and contents."""
        count = self.entries()
        lines = [
            "------------- ",
            "[composite] identifiers : [%5d, %5d]" % (self.group, self.item),
            "[composite] format      : [%s], row size = %5d , nrows = %5d"
            % (self._format(), self._row_offset, self.rows()),
            "[composite] entry       : " + "".join("%5d " % k for k in range(count)),
            "[composite] types       : " + "".join("%5d " % t for t in self._types),
            "[composite] offsets     : " + "".join("%5d " % o for o in self._offsets),
            "------------",
        ]
        for e in range(count):
            kind = self._types[e]
            values = []
            for r in range(self.rows()):
                if kind in (1, 2, 3):
                    values.append("%8d " % self.get_int(e, r))
                elif kind == 4:
                    values.append("%8.5f " % self.get_float(e, r))
                elif kind == 8:
                    values.append("%d " % self.get_long(e, r))
            lines.append("%5d : " % e + "".join(values))
        return "\n".join(lines)

    def reset(self) -> None:
        self.set_data_length(0)