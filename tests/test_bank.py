import pytest

from hipolite.bank import Bank, RowList
from hipolite.dictionary import Schema


def make_schema() -> Schema:
    schema = Schema("REC::Particle", 300, 31)
    schema.parse("pid/I,px/F,charge/B,status/S,vz/D,uid/L")
    return schema


def filled_bank(rows: int = 4) -> Bank:
    bank = Bank(make_schema(), rows)
    for r in range(rows):
        bank.put("pid", r, 11 * (r + 1))
        bank.put("px", r, 0.5 * r)
        bank.put("charge", r, r - 1)
        bank.put("status", r, 100 + r)
        bank.put("vz", r, -2.25 * r)
        bank.put("uid", r, 10**12 + r)
    return bank


def test_set_rows_writes_header():
    schema = make_schema()
    bank = Bank(schema, 5)
    assert bank.rows == 5
    assert bank.kind == 11
    assert bank.group == 300
    assert bank.item == 31
    assert bank.size() == schema.size_for_rows(5)


def test_round_trip_all_types():
    bank = filled_bank()
    for r in range(4):
        assert bank.get_int("pid", r) == 11 * (r + 1)
        assert bank.get_float("px", r) == 0.5 * r
        assert bank.get_byte("charge", r) == r - 1
        assert bank.get_short("status", r) == 100 + r
        assert bank.get_double("vz", r) == -2.25 * r
        assert bank.get_long("uid", r) == 10**12 + r


def test_generic_get_matches_typed_getters():
    bank = filled_bank()
    for entry in range(len(bank.schema)):
        for r in range(bank.rows):
            name = bank.schema.entry_name(entry)
            assert bank.get(entry, r) == bank.get(name, r)
    assert bank.get("px", 3) == bank.get_float("px", 3)


def test_columnar_layout():
    schema = Schema("t", 1, 2)
    schema.parse("a/B,b/I")
    bank = Bank(schema, 3)
    bank.put_int("b", 1, 77)
    # column b starts after all 3 bytes of column a
    assert bank.get_int_at(3 + 4) == 77


def test_put_converts_value_to_column_type():
    bank = Bank(make_schema(), 1)
    bank.put("pid", 0, 3.7)
    assert bank.get_int("pid", 0) == 3
    bank.put("charge", 0, 255)
    assert bank.get_byte("charge", 0) == -1


def test_integer_getters_reject_wrong_types():
    bank = filled_bank()
    with pytest.raises(TypeError):
        bank.get_int("px", 0)
    with pytest.raises(TypeError):
        bank.get_short("pid", 0)
    with pytest.raises(TypeError):
        bank.get_byte("status", 0)


def test_small_integers_widen():
    bank = filled_bank()
    assert bank.get_int("charge", 2) == bank.get_byte("charge", 2)
    assert bank.get_short("charge", 0) == bank.get_byte("charge", 0)


def test_float_getters_on_other_types_return_zero():
    bank = filled_bank()
    assert bank.get_float("pid", 1) == 0.0
    assert bank.get_double("pid", 1) == 0.0
    assert bank.get_long("pid", 1) == 0
    assert bank.get_double("px", 3) == bank.get_float("px", 3)


def test_unknown_column_name_raises():
    bank = filled_bank()
    with pytest.raises(KeyError):
        bank.get("energy", 0)


def test_columns():
    bank = filled_bank()
    assert bank.column_int("pid") == [bank.get_int("pid", r) for r in range(4)]
    assert bank.column_float("px") == [bank.get_float("px", r) for r in range(4)]
    assert bank.column_double("vz") == [bank.get_double("vz", r) for r in range(4)]
    assert bank.column_double("px") == bank.column_float("px")
    assert bank.column_float("pid") == []
    assert bank.column_double("uid") == []
    with pytest.raises(TypeError):
        bank.column_int("vz")


def test_row_list_and_filter():
    bank = filled_bank()
    assert bank.row_list() == [0, 1, 2, 3]
    bank.mutable_row_list().filter(lambda b, r: b.get_int("charge", r) != 0)
    assert bank.row_list() == [0, 2, 3]
    assert bank.full_row_list() == [0, 1, 2, 3]
    bank.mutable_row_list().reset()
    assert bank.row_list() == [0, 1, 2, 3]


def test_linked_rows():
    schema = Schema("link", 5, 5)
    schema.parse("pindex/S,value/F")
    bank = Bank(schema, 5)
    for r, p in enumerate([0, 1, 0, 2, 0]):
        bank.put("pindex", r, p)
    assert bank.linked_rows(0, "pindex") == [0, 2, 4]
    assert bank.linked_rows(3, 0) == []


def test_show_full_and_filtered():
    bank = filled_bank()
    full = bank.show()
    assert "FILTERED" not in full
    assert len(full.splitlines()) == 1 + len(bank.schema)
    bank.mutable_row_list().filter(lambda b, r: r < 2)
    filtered = bank.show()
    assert "FILTERED FROM 4 TOTAL" in filtered
    assert "FILTERED" not in bank.show(True)


def test_format_value():
    bank = filled_bank()
    assert bank.format_value(0, 0) == "%8d " % bank.get_int("pid", 0)
    assert bank.format_value(5, 1) == "%14d " % bank.get_long("uid", 1)


def test_reset():
    bank = filled_bank()
    bank.reset()
    assert bank.rows == 0
    assert bank.size() == 0
    assert bank.row_list() == []


def test_notify_restores_rows_from_buffer():
    source = filled_bank(3)
    data = bytes(source.buffer[: 8 + source.size()])
    copy = Bank(make_schema())
    copy.init(data)
    copy.notify()
    assert copy.rows == 3
    assert copy.row_list() == [0, 1, 2]
    assert copy.column_int("pid") == source.column_int("pid")
    assert copy.get_long("uid", 2) == source.get_long("uid", 2)


def test_rowlist_full_list():
    assert RowList.full_list(0) == []
    assert RowList.full_list(600) == list(range(600))
    with pytest.raises(ValueError):
        RowList.full_list(-1)


def test_rowlist_without_owner():
    rows = RowList()
    with pytest.raises(RuntimeError):
        rows.filter(lambda b, r: True)
    with pytest.raises(RuntimeError):
        rows.reset()
    rows.reset(3)
    assert rows.rows == [0, 1, 2]


def test_rowlist_uninitialized_warns():
    rows = RowList()
    assert rows.initialized is False
    with pytest.warns(UserWarning):
        assert rows.rows == []
    rows.set_rows([4, 2])
    assert rows.initialized is True
    assert rows.rows == [4, 2]