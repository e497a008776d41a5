"""Bank schemas and the dictionary that holds them."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

__all__ = [
    "EntryType",
    "SchemaEntry",
    "SchemaNotFoundError",
    "Schema",
    "Dictionary",
    "type_size",
]


class EntryType(enum.IntEnum):
    """Column types a schema entry can have."""

    BYTE = 1
    SHORT = 2
    INT = 3
    FLOAT = 4
    DOUBLE = 5
    LONG = 8


_TYPE_CODES = {
    "B": EntryType.BYTE,
    "S": EntryType.SHORT,
    "I": EntryType.INT,
    "F": EntryType.FLOAT,
    "D": EntryType.DOUBLE,
    "L": EntryType.LONG,
}

_TYPE_SIZES = {
    EntryType.BYTE: 1,
    EntryType.SHORT: 2,
    EntryType.INT: 4,
    EntryType.FLOAT: 4,
    EntryType.DOUBLE: 8,
    EntryType.LONG: 8,
}


def type_size(kind: int) -> int:
    """Return the size in bytes of a type id, or 0 for an unknown id."""
    try:
        return _TYPE_SIZES[EntryType(kind)]
    except ValueError:
        return 0


def _tokenize(text: str, delimiter: str) -> list[str]:
    return [token for token in text.split(delimiter) if token]


@dataclass
class SchemaEntry:
    """One column of a schema: name, type code, type id, size and offset."""

    name: str
    type: str
    type_id: int
    type_size: int
    offset: int


class SchemaNotFoundError(KeyError):
    """Raised when a dictionary has no schema of the requested name."""


class Schema:
    """Column layout of a bank, identified by name, group and item."""

    def __init__(self, name: str = "", group: int = 0, item: int = 0) -> None:
        self._name = name
        self._group = group
        self._item = item
        self.entries: list[SchemaEntry] = []
        self._order: dict[str, int] = {}

    def parse(self, spec: str) -> None:
        """Append the entries described by a "name/T,name/T" string."""
        offset = self.row_length()
        for chunk in _tokenize(spec, ","):
            parts = _tokenize(chunk, "/")
            if len(parts) < 2:
                raise ValueError(f"malformed schema entry: {chunk!r}")
            name = parts[0].strip()
            code = parts[1].strip()
            kind = _TYPE_CODES.get(code)
            type_id = int(kind) if kind is not None else -1
            size = type_size(type_id)
            self._order[name] = len(self.entries)
            self.entries.append(SchemaEntry(name, code, type_id, size, offset))
            offset += size

    @property
    def name(self) -> str:
        return self._name

    @property
    def group(self) -> int:
        return self._group

    @property
    def item(self) -> int:
        return self._item

    def __len__(self) -> int:
        return len(self.entries)

    def row_length(self) -> int:
        """Number of bytes one row of all columns occupies."""
        if not self.entries:
            return 0
        last = self.entries[-1]
        return last.offset + last.type_size

    def size_for_rows(self, rows: int) -> int:
        """Number of bytes needed to store the given number of rows."""
        if not self.entries:
            return 0
        last = len(self.entries) - 1
        return self.offset(last, rows - 1, rows) + self.entries[last].type_size

    def exists(self, name: str) -> bool:
        return name in self._order

    def entry_order(self, name: str) -> int:
        """Return the column index of a name; raise KeyError if unknown."""
        try:
            return self._order[name]
        except KeyError:
            raise KeyError(
                f"item {name!r} not found in bank {self._name!r}"
            ) from None

    def _index(self, item: int | str) -> int:
        return self.entry_order(item) if isinstance(item, str) else item

    def offset(self, item: int | str, order: int, rows: int) -> int:
        """Byte offset of row ``order`` of a column in a bank of ``rows`` rows."""
        entry = self.entries[self._index(item)]
        return rows * entry.offset + order * entry.type_size

    def entry_type(self, item: int | str) -> int:
        """Type id of a column; -1 for an unknown column name."""
        if isinstance(item, str):
            if not self.exists(item):
                return -1
            item = self._order[item]
        return self.entries[item].type_id

    def entry_name(self, item: int) -> str:
        return self.entries[item].name

    def schema_string(self) -> str:
        body = ",".join(f"{e.name}/{e.type}" for e in self.entries)
        return f"{{{self._name}/{self._group}/{self._item}}}{{{body}}}"

    def schema_json(self) -> str:
        head = (
            f'{{ "name": "{self._name}", "group": {self._group}, '
            f'"item": {self._item}, "info": " ",'
        )
        entries = ",".join(
            f'{{"name":"{e.name}", "type":"{e.type}", "info":" "}}'
            for e in self.entries
        )
        return f'{head}"entries": [ {entries}] }}'

    def show(self) -> str:
        lines = [
            "schema : %14s , group = %6d, item = %3d"
            % (self._name, self._group, self._item)
        ]
        lines.extend(
            "%16s : (%3s) %5d %5d , offset = %3d --> [%s]"
            % (e.name, e.type, e.type_id, e.type_size, e.offset, e.name)
            for e in self.entries
        )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Schema({self.schema_string()!r})"


_BLOCK = re.compile(r"\{([^{}]*)\}")


class Dictionary:
    """A collection of schemas keyed by name."""

    def __init__(self) -> None:
        self._schemas: dict[str, Schema] = {}

    def add_schema(self, schema: Schema) -> None:
        self._schemas[schema.name] = schema

    def has_schema(self, name: str) -> bool:
        return name in self._schemas

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def get_schema(self, name: str) -> Schema:
        try:
            return self._schemas[name]
        except KeyError:
            raise SchemaNotFoundError(f"schema {{{name}}} does not exist") from None

    def schema_names(self) -> list[str]:
        """Names of all schemas, in sorted order."""
        return sorted(self._schemas)

    def parse(self, text: str) -> Schema:
        """Parse a "{name/group/item}{entries}" string and add the schema."""
        blocks = _BLOCK.findall(text)
        if len(blocks) < 2:
            raise ValueError(f"malformed schema string: {text!r}")
        head = _tokenize(blocks[0], "/")
        if len(head) < 3:
            raise ValueError(f"malformed schema header: {blocks[0]!r}")
        schema = Schema(head[0], int(head[1].strip()), int(head[2].strip()))
        schema.parse(blocks[1])
        self.add_schema(schema)
        return schema

    def show(self) -> str:
        return "\n".join(
            "%24s : %5d %5d %5d" % (s.name, s.group, s.item, len(s))
            for s in (self._schemas[n] for n in self.schema_names())
        )