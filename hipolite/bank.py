"""Schema-described banks with column-wise storage and filterable row lists."""

from __future__ import annotations

import warnings
from typing import Callable

from .dictionary import EntryType, Schema
from .structure import Structure

__all__ = ["RowList", "Bank"]

_BANK_TYPE = 11
_INTEGER_TYPES = (EntryType.BYTE, EntryType.SHORT, EntryType.INT)


class RowList:
    """An ordered selection of the rows of a bank."""

    def __init__(self, owner: "Bank | None" = None) -> None:
        self._owner = owner
        self._rows: list[int] = []
        self._initialized = False

    def _require_owner(self, caller: str) -> "Bank":
        if self._owner is None:
            raise RuntimeError(
                f"attempted to call RowList.{caller}, "
                "but no bank is associated to this row list"
            )
        return self._owner

    def reset(self, num_rows: int = -1) -> None:
        """Select every row; a negative count takes the owner bank's row count."""
        self._rows = []
        self._initialized = False
        if num_rows < 0:
            num_rows = self._require_owner("reset").rows
        self._rows = self.full_list(num_rows)
        self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def rows(self) -> list[int]:
        """The selected row numbers."""
        if not self._initialized:
            warnings.warn(
                "attempted to get an uninitialized bank row list", stacklevel=2
            )
        return self._rows

    def set_rows(self, rows) -> None:
        self._rows = list(rows)
        self._initialized = True

    @property
    def owner(self) -> "Bank | None":
        return self._owner

    @owner.setter
    def owner(self, bank: "Bank | None") -> None:
        self._owner = bank

    def filter(self, predicate: Callable[["Bank", int], bool]) -> None:
        """Keep only the rows for which ``predicate(bank, row)`` is true."""
        bank = self._require_owner("filter")
        self._rows = [row for row in self._rows if predicate(bank, row)]

    @staticmethod
    def full_list(num: int) -> list[int]:
        """Return the row numbers 0 .. num-1."""
        if num < 0:
            raise ValueError("a full row list can not have a negative size")
        return list(range(num))

    def __iter__(self):
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)


class Bank(Structure):
    """A structure of type 11 whose columns are described by a schema.

    Data is stored column by column: all rows of the first column, then all
    rows of the second, and so on.
    """

    def __init__(self, schema: Schema, rows: int | None = None) -> None:
        super().__init__()
        self._schema = schema
        self._rows = 0
        self._row_list = RowList(self)
        if rows is not None:
            self.set_rows(rows)

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def rows(self) -> int:
        """Number of all rows, regardless of any filtering of the row list."""
        return self._rows

    def set_rows(self, rows: int) -> None:
        """Resize the bank to ``rows`` rows and select all of them."""
        self._rows = rows
        size = self._schema.size_for_rows(rows)
        self.init_by_size(self._schema.group, self._schema.item, _BANK_TYPE, size)
        self._row_list.reset(rows)

    def _item(self, item: int | str) -> int:
        return self._schema.entry_order(item) if isinstance(item, str) else item

    def _offset(self, item: int, index: int) -> int:
        return self._schema.offset(item, index, self._rows)

    def get(self, item: int | str, index: int):
        """Read a value of any column type."""
        item = self._item(item)
        kind = self._schema.entry_type(item)
        offset = self._offset(item, index)
        if kind == EntryType.BYTE:
            return self.get_byte_at(offset)
        if kind == EntryType.SHORT:
            return self.get_short_at(offset)
        if kind == EntryType.INT:
            return self.get_int_at(offset)
        if kind == EntryType.FLOAT:
            return self.get_float_at(offset)
        if kind == EntryType.DOUBLE:
            return self.get_double_at(offset)
        if kind == EntryType.LONG:
            return self.get_long_at(offset)
        raise TypeError(
            f"unknown type for [{self._schema.entry_name(item)}] type = {kind}"
        )

    def _get_integer(self, item: int, index: int, allowed, label: str) -> int:
        kind = self._schema.entry_type(item)
        if kind not in allowed:
            raise TypeError(
                f"requested {label} for [{self._schema.entry_name(item)}] type = {kind}"
            )
        offset = self._offset(item, index)
        if kind == EntryType.BYTE:
            return self.get_byte_at(offset)
        if kind == EntryType.SHORT:
            return self.get_short_at(offset)
        return self.get_int_at(offset)

    def get_int(self, item: int | str, index: int) -> int:
        return self._get_integer(self._item(item), index, _INTEGER_TYPES, "INT")

    def get_short(self, item: int | str, index: int) -> int:
        return self._get_integer(
            self._item(item), index, (EntryType.BYTE, EntryType.SHORT), "SHORT"
        )

    def get_byte(self, item: int | str, index: int) -> int:
        return self._get_integer(self._item(item), index, (EntryType.BYTE,), "BYTE")

    def get_float(self, item: int | str, index: int) -> float:
        """Value of a float column; 0.0 for a column of another type."""
        item = self._item(item)
        if self._schema.entry_type(item) == EntryType.FLOAT:
            return self.get_float_at(self._offset(item, index))
        return 0.0

    def get_double(self, item: int | str, index: int) -> float:
        """Value of a double or float column; 0.0 for other types."""
        item = self._item(item)
        kind = self._schema.entry_type(item)
        if kind == EntryType.DOUBLE:
            return self.get_double_at(self._offset(item, index))
        if kind == EntryType.FLOAT:
            return self.get_float_at(self._offset(item, index))
        return 0.0

    def get_long(self, item: int | str, index: int) -> int:
        """Value of a long column; 0 for a column of another type."""
        item = self._item(item)
        if self._schema.entry_type(item) == EntryType.LONG:
            return self.get_long_at(self._offset(item, index))
        return 0

    def column_int(self, item: int | str) -> list[int]:
        item = self._item(item)
        return [
            self._get_integer(item, row, _INTEGER_TYPES, "INT")
            for row in range(self._rows)
        ]

    def column_float(self, item: int | str) -> list[float]:
        item = self._item(item)
        if self._schema.entry_type(item) != EntryType.FLOAT:
            return []
        return [self.get_float_at(self._offset(item, row)) for row in range(self._rows)]

    def column_double(self, item: int | str) -> list[float]:
        item = self._item(item)
        kind = self._schema.entry_type(item)
        if kind == EntryType.DOUBLE:
            reader = self.get_double_at
        elif kind == EntryType.FLOAT:
            reader = self.get_float_at
        else:
            return []
        return [reader(self._offset(item, row)) for row in range(self._rows)]

    def put(self, item: int | str, index: int, value) -> None:
        """Write a value, converting it to the column's type."""
        item = self._item(item)
        kind = self._schema.entry_type(item)
        if kind == EntryType.BYTE:
            self.put_byte(item, index, int(value))
        elif kind == EntryType.SHORT:
            self.put_short(item, index, int(value))
        elif kind == EntryType.INT:
            self.put_int(item, index, int(value))
        elif kind == EntryType.FLOAT:
            self.put_float(item, index, float(value))
        elif kind == EntryType.DOUBLE:
            self.put_double(item, index, float(value))
        elif kind == EntryType.LONG:
            self.put_long(item, index, int(value))
        else:
            raise TypeError(
                f"unknown type for [{self._schema.entry_name(item)}] type = {kind}"
            )

    def put_int(self, item: int | str, index: int, value: int) -> None:
        self.put_int_at(self._offset(self._item(item), index), value)

    def put_short(self, item: int | str, index: int, value: int) -> None:
        self.put_short_at(self._offset(self._item(item), index), value)

    def put_byte(self, item: int | str, index: int, value: int) -> None:
        self.put_byte_at(self._offset(self._item(item), index), value)

    def put_float(self, item: int | str, index: int, value: float) -> None:
        self.put_float_at(self._offset(self._item(item), index), value)

    def put_double(self, item: int | str, index: int, value: float) -> None:
        self.put_double_at(self._offset(self._item(item), index), value)

    def put_long(self, item: int | str, index: int, value: int) -> None:
        self.put_long_at(self._offset(self._item(item), index), value)

    def row_list(self) -> list[int]:
        """The selected rows; a subset of all rows if the list was filtered."""
        return self._row_list.rows

    def full_row_list(self) -> list[int]:
        """Every row number of the bank."""
        return RowList.full_list(self._rows)

    def mutable_row_list(self) -> RowList:
        """The bank's own row list, for filtering it in place."""
        self._row_list.owner = self
        return self._row_list

    def linked_rows(self, row: int, column: int | str) -> list[int]:
        """Selected rows ``r`` for which ``get_int(column, r) == row``."""
        return [r for r in self.row_list() if self.get_int(column, r) == row]

    def format_value(self, entry: int, row: int) -> str:
        kind = self._schema.entry_type(entry)
        if kind in _INTEGER_TYPES:
            return "%8d " % self.get_int(entry, row)
        if kind == EntryType.FLOAT:
            return "%8.5f " % self.get_float(entry, row)
        if kind == EntryType.DOUBLE:
            return "%8.5f " % self.get_double(entry, row)
        if kind == EntryType.LONG:
            return "%14d " % self.get_long(entry, row)
        return ""

    def show(self, show_all_rows: bool = False) -> str:
        """Text dump of the selected rows, or of all rows if asked."""
        selected = self._row_list._rows
        loop_all = (
            show_all_rows
            or not self._row_list.initialized
            or len(selected) == self._rows
        )
        if loop_all:
            rows = range(self._rows)
            lines = ["BANK :: NAME %24s , ROWS %6d" % (self._schema.name, self._rows)]
        else:
            rows = selected
            lines = [
                "BANK :: NAME %24s , ROWS %6d (FILTERED FROM %d TOTAL)"
                % (self._schema.name, len(selected), self._rows)
            ]
        for entry in range(len(self._schema)):
            values = "".join(self.format_value(entry, r) for r in rows)
            lines.append("%18s : " % self._schema.entry_name(entry) + values)
        return "\n".join(lines)

    def reset(self) -> None:
        """Drop all rows."""
        self.set_size(0)
        self._rows = 0
        self._row_list.reset(0)

    def notify(self) -> None:
        """Recompute the row count from the structure size after a new buffer."""
        length = self._schema.row_length()
        self._rows = self.size() // length if length else 0
        self._row_list.reset(self._rows)