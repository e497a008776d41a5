# hipolite

A small, dependency-free Python library for working with HIPO-style event data:
schema dictionaries, typed column banks, composite nodes, event buffers, the
fixed file header and the record/event index used to step through a file.

## Installation

```
pip install hipolite
```

## Schemas and dictionaries

A schema describes the columns of a bank. Column types are `B` (byte),
`S` (short), `I` (int), `F` (float), `D` (double) and `L` (long); they are
listed in the `EntryType` enum.

```python
from hipolite.dictionary import Dictionary, Schema

schema = Schema("REC::Particle", 300, 31)
schema.parse("pid/I,px/F,py/F,pz/F,charge/B")
print(schema.row_length())        # bytes per row
print(schema.schema_string())     # {REC::Particle/300/31}{pid/I,px/F,...}
print(schema.schema_json())

factory = Dictionary()
factory.parse("{REC::Track/300/36}{index/S,chi2/F}")
print(factory.schema_names())     # sorted names
```

`Schema.entry_order` raises `KeyError` for an unknown column name, and
`Dictionary.get_schema` raises `SchemaNotFoundError` for an unknown schema.

## Banks

A `Bank` stores its data column by column in one little-endian buffer.
Columns can be addressed by index or by name.

```python
from hipolite.bank import Bank

bank = Bank(schema, 2)
bank.put("pid", 0, 11)
bank.put("px", 0, 1.5)
print(bank.rows, bank.get_int("pid", 0), bank.get_float("px", 0))

rows = bank.mutable_row_list()
rows.filter(lambda b, r: b.get_int("pid", r) == 11)
print(bank.row_list())            # selected rows
print(bank.full_row_list())       # all rows
print(bank.show())
```

`get_int`, `get_short` and `get_byte` raise `TypeError` when the column is
not of a fitting integer type; `get_float`, `get_double` and `get_long`
return zero for a column of another type.

## Events

An `Event` is a fixed-capacity byte buffer holding a sequence of
structures, each identified by a group and item number.

```python
from hipolite.event import Event

event = Event()
event.add_structure(bank)
copy = Bank(schema)
event.read(copy)                  # True if the structure was found
print(copy.rows)
print(event.show())
```

Adding a structure beyond the event's capacity raises `EventCapacityError`.
`Event.remove`, `Event.remove_bank` and `Event.replace` edit structures in
place; `find_structure`, `read_structure_from` and `read_node_from` work on
any event buffer.

## Composite nodes

`Composite` stores formatted rows without a dictionary, using a format
string such as `"bsifdl"`.

```python
from hipolite.structure import Composite

comp = Composite(32000, 1, "if", 10)
comp.put_int(0, 0, 42)
comp.put_float(1, 0, 0.5)
print(comp.rows(), comp.get_int(0, 0))
print(comp.describe())
```

Writing past the capacity raises `ValueError`, and reading a row that is
not stored raises `IndexError`.

## File header, streams and index

- `hipolite.header.FileHeader.from_bytes` decodes the fixed file header in
  either byte order, and `to_bytes` encodes it back.
- `hipolite.datastream.LocalFileStream` reads bytes from a local file with
  random access and works as a context manager.
- `hipolite.index.ReaderIndex` keeps track of which record holds which event
  while stepping forward, backward or jumping to an event or record;
  `ReaderIndex.from_index_structure` builds it from an index structure.

## What it does not do

The package has no file reader: it does not read records out of a file,
does not decompress record data and has no command-line tool. The pieces
above decode the header and index and hold events once their bytes are in
memory.