"""Events: a buffer of structures and nodes behind a 16-byte event header.

The event header is the signature ``EVNT``, the event size in bytes (header
included) as a 32-bit word, a 32-bit tag and a reserved word. Structures
follow one another directly after the header.
"""

from __future__ import annotations

import struct
from typing import Iterator

from .bank import Bank
from .node import Node
from .structure import Structure

__all__ = [
    "EventCapacityError",
    "Event",
    "find_structure",
    "read_structure_from",
    "read_node_from",
]

_SIGNATURE = b"EVNT"
_EVENT_HEADER_SIZE = 16
_DEFAULT_CAPACITY = 128 * 1024
_HEADER = struct.Struct("<HBBI")
_WORD = struct.Struct("<I")
_EMPTY_TYPE = 1


class EventCapacityError(Exception):
    """Raised when a structure does not fit into the event buffer."""


def _walk(buffer) -> Iterator[tuple[int, int, int, int, int, int]]:
    """Yield (position, group, item, type, format length, length) per structure."""
    event_size = _WORD.unpack_from(buffer, 4)[0]
    position = _EVENT_HEADER_SIZE
    while position + 8 < event_size:
        group, item, kind, word = _HEADER.unpack_from(buffer, position)
        length = word & 0x00FFFFFF
        yield position, group, item, kind, (word >> 24) & 0xFF, length
        position += length + 8


def find_structure(buffer, group: int, item: int) -> tuple[int, int] | None:
    """Return (position, length) of a structure in an event buffer, or None."""
    for position, gid, iid, _kind, _fmt, length in _walk(buffer):
        if gid == group and iid == item:
            return position, length
    return None


def read_structure_from(buffer, structure: Structure, group: int, item: int) -> bool:
    """Copy a structure out of an event buffer; empty it if it is absent.

    Returns True if the structure was found.
    """
    found = find_structure(buffer, group, item)
    if found is None:
        structure.init_by_size(group, item, _EMPTY_TYPE, 0)
        structure.notify()
        return False
    position, length = found
    structure.init(bytes(buffer[position : position + length + 8]))
    structure.notify()
    return True


def read_node_from(buffer, node: Node, group: int, item: int) -> bool:
    """Copy a node out of an event buffer; empty it if it is absent.

    Returns True if the node was found.
    """
    found = find_structure(buffer, group, item)
    if found is None:
        node.init_empty()
        node.notify()
        return False
    position, length = found
    node.init(bytes(buffer[position : position + length + 8]))
    return True


class Event:
    """A fixed-capacity buffer holding a sequence of structures."""

    def __init__(self, size: int = _DEFAULT_CAPACITY) -> None:
        if size < _EVENT_HEADER_SIZE:
            raise ValueError(
                f"event capacity must be at least {_EVENT_HEADER_SIZE} bytes, got {size}"
            )
        self._buffer = bytearray(size)
        self.reset()

    def reset(self) -> None:
        """Clear the event to an empty header with tag 0."""
        self._buffer[0:4] = _SIGNATURE
        _WORD.pack_into(self._buffer, 4, _EVENT_HEADER_SIZE)
        _WORD.pack_into(self._buffer, 8, 0)
        _WORD.pack_into(self._buffer, 12, 0)

    def size(self) -> int:
        """Number of bytes in use, the event header included."""
        return _WORD.unpack_from(self._buffer, 4)[0]

    def _set_size(self, size: int) -> None:
        _WORD.pack_into(self._buffer, 4, size & 0xFFFFFFFF)

    @property
    def capacity(self) -> int:
        return len(self._buffer)

    @property
    def tag(self) -> int:
        return struct.unpack_from("<i", self._buffer, 8)[0]

    def set_tag(self, tag: int) -> None:
        _WORD.pack_into(self._buffer, 8, tag & 0xFFFFFFFF)

    @property
    def buffer(self) -> bytearray:
        """The underlying buffer, event header first."""
        return self._buffer

    def init(self, data: bytes) -> None:
        """Load a complete event image; its size becomes ``len(data)``."""
        if len(self._buffer) <= len(data):
            self._buffer.extend(bytes(len(data) + 1024 - len(self._buffer)))
        self._buffer[: len(data)] = data
        self._set_size(len(data))

    def structure_position(self, group: int, item: int) -> tuple[int, int] | None:
        """Return (position, length) of a structure in this event, or None."""
        return find_structure(self._buffer, group, item)

    def read_structure(self, structure: Structure, group: int, item: int) -> bool:
        """Copy the structure (group, item) into ``structure``."""
        return read_structure_from(self._buffer, structure, group, item)

    def read(self, bank: Bank) -> bool:
        """Fill a bank from the structure matching its schema's group and item."""
        return self.read_structure(bank, bank.schema.group, bank.schema.item)

    def _append(self, data: bytes) -> None:
        event_size = self.size()
        if event_size + len(data) >= len(self._buffer):
            raise EventCapacityError(
                f"error adding structure with size = {len(data)} "
                f"(capacity = {len(self._buffer)}, size = {event_size})"
            )
        self._buffer[event_size : event_size + len(data)] = data
        self._set_size(event_size + len(data))

    def add_structure(self, structure: Structure) -> None:
        """Append a structure; structures with no payload are skipped."""
        data_size = structure.size()
        if data_size <= 0:
            return
        self._append(bytes(structure.buffer[: data_size + 8]))

    def add(self, node: Node) -> None:
        """Append a node; nodes with no data are skipped."""
        if node.data_length() == 0:
            return
        self._append(bytes(node.buffer[: node.node_length() + 8]))

    def get(self, node: Node, group: int, item: int) -> bool:
        """Copy the node (group, item) into ``node``."""
        return read_node_from(self._buffer, node, group, item)

    def remove(self, group: int, item: int) -> bool:
        """Remove the structure (group, item); return False if it is absent."""
        found = self.structure_position(group, item)
        if found is None:
            return False
        position, length = found
        event_size = self.size()
        new_size = event_size - (length + 8)
        self._buffer[position:new_size] = self._buffer[position + length + 8 : event_size]
        self._set_size(new_size)
        return True

    def remove_bank(self, bank: Bank) -> bool:
        return self.remove(bank.schema.group, bank.schema.item)

    def replace(self, bank: Bank) -> bool:
        """Overwrite the bank's structure in place; sizes must match.

        Returns False if the event holds no such structure.
        """
        found = self.structure_position(bank.schema.group, bank.schema.item)
        if found is None:
            return False
        position, length = found
        old_size = length + 8
        new_size = bank.size() + 8
        if old_size != new_size:
            raise ValueError(
                f"error in replacing the bank {bank.schema.name}: "
                f"size {new_size} differs from stored size {old_size}"
            )
        self._buffer[position : position + new_size] = bank.buffer[:new_size]
        return True

    def show(self) -> str:
        lines = [" EVENT  SIZE = %d" % self.size()]
        lines.extend(
            "%12s node [%9d %4d] type = %12d, format size = %3d , length = %12d"
            % (" ", group, item, kind, fmt, length)
            for _pos, group, item, kind, fmt, length in _walk(self._buffer)
        )
        return "\n".join(lines)