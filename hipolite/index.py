"""Event index over the records of a file.

The index keeps the cumulative number of events at each record boundary
and the file position of every record. It tracks the current event, the
record that holds it and the event number inside that record.
"""

from __future__ import annotations

import bisect
from typing import Iterable

from .structure import Structure

__all__ = ["ReaderIndex"]

_INDEX_ROW_SIZE = 32


class ReaderIndex:
    """Walks events across records, telling when a new record must be loaded."""

    def __init__(self) -> None:
        self._record_events: list[int] = []
        self._record_positions: list[int] = []
        self._current_record = 0
        self._current_event = 0
        self._current_record_event = 0

    @classmethod
    def from_index_structure(
        cls, structure: Structure, tags: Iterable[int] | None = None
    ) -> "ReaderIndex":
        """Build an index from the trailer's index structure (32111, 1).

        The structure holds, column by column, 32 bytes per record: the
        record position (64 bits), the record length (64 bits), the number
        of events (32 bits), the record length again (32 bits) and the user
        word (64 bits). With ``tags`` given, only records whose user word is
        among them are kept. The index is rewound before it is returned.
        """
        wanted = set(tags) if tags is not None else set()
        index = cls()
        rows = structure.size() // _INDEX_ROW_SIZE
        for i in range(rows):
            position = structure.get_long_at(i * 8)
            entries = structure.get_int_at(rows * 12 + i * 4)
            user_word = structure.get_long_at(rows * 16 + i * 8)
            if not wanted or user_word in wanted:
                index.add_size(entries)
                index.add_position(position)
        index.rewind()
        return index

    def add_size(self, size: int) -> None:
        """Append a record holding ``size`` events."""
        if not self._record_events:
            self._record_events.extend((0, size))
        else:
            self._record_events.append(self._record_events[-1] + size)

    def add_position(self, position: int) -> None:
        """Append the file position of the next record."""
        self._record_positions.append(position)

    def position(self, index: int) -> int:
        """File position of record ``index``."""
        return self._record_positions[index]

    @property
    def max_events(self) -> int:
        """Total number of events in all records."""
        if not self._record_events:
            return 0
        return self._record_events[-1]

    @property
    def record_count(self) -> int:
        """Number of records in the index."""
        return max(len(self._record_events) - 1, 0)

    @property
    def event_number(self) -> int:
        return self._current_event

    @property
    def record_number(self) -> int:
        return self._current_record

    @property
    def record_event_number(self) -> int:
        return self._current_record_event

    def _boundary(self, record: int) -> int | None:
        if 0 <= record < len(self._record_events):
            return self._record_events[record]
        return None

    def can_advance(self) -> bool:
        """True if there is an event after the current one."""
        return self._current_event < self.max_events - 1

    def advance(self) -> bool:
        """Move to the next event, crossing into the next record if needed."""
        if not self._record_events:
            return False
        end = self._boundary(self._current_record + 1)
        if end is not None and self._current_event + 1 < end:
            self._current_event += 1
            self._current_record_event += 1
            return True
        if len(self._record_events) < self._current_record + 3:
            return False
        self._current_event += 1
        self._current_record += 1
        self._current_record_event = 0
        return True

    def can_advance_in_record(self) -> bool:
        """True if the next event lies in the current record."""
        end = self._boundary(self._current_record + 1)
        if end is None:
            return False
        return self._current_event < end - 1

    def goto_event(self, event_number: int) -> bool:
        """Point at ``event_number``; return False if there is no such event."""
        if event_number < 0 or event_number >= self.max_events:
            return False
        bound = bisect.bisect_left(self._record_events, event_number + 1)
        self._current_record = bound - 1
        self._current_record_event = (
            event_number - self._record_events[self._current_record]
        )
        self._current_event = bound
        return True

    def goto_record(self, irec: int) -> bool:
        """Point just before the first event of record ``irec``."""
        if irec == 0:
            self._current_event = -1
            self._current_record = 0
            self._current_record_event = -1
            return True
        if irec < 0 or irec + 1 > len(self._record_events):
            return False
        self._current_event = self._record_events[irec] - 1
        self._current_record = irec
        self._current_record_event = -1
        return True

    def load_record(self, irec: int) -> bool:
        """Same as :meth:`goto_record`."""
        return self.goto_record(irec)

    def backup(self) -> bool:
        """Step back one event; return False if the index is empty."""
        if not self._record_events:
            return False
        if (
            self._current_record != 0
            and self._current_event == self._record_events[self._current_record]
        ):
            self._current_event -= 1
            self._current_record -= 1
            if self._current_record > 0:
                self._current_record_event = (
                    self._record_events[self._current_record + 1]
                    - self._record_events[self._current_record]
                    - 1
                )
            else:
                self._current_record_event = self._current_event - 1
            return True
        self._current_event -= 1
        self._current_record_event -= 1
        return True

    def rewind(self) -> None:
        """Point before the first event so that :meth:`advance` reaches it."""
        self._current_record = -1
        self._current_event = -1
        self._current_record_event = -1

    def clear(self) -> None:
        """Drop all records; the current pointers are left as they are."""
        self._record_events.clear()
        self._record_positions.clear()

    def reset(self) -> None:
        self._current_record = 0
        self._current_event = 0
        self._current_record_event = 0

    def show(self) -> str:
        return "\n".join(
            "record = %8d, %8d" % (i, count)
            for i, count in enumerate(self._record_events)
        )