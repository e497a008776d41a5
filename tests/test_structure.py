import struct

import pytest

from hipolite.structure import Composite, Structure


def test_from_string_round_trip():
    s = Structure.from_string(120, 2, "{bank/1/2}{a/I}")
    assert s.get_string() == "{bank/1/2}{a/I}"
    assert s.group == 120
    assert s.item == 2
    assert s.kind == 6
    assert s.size() == len("{bank/1/2}{a/I}")


def test_from_string_wire_bytes():
    s = Structure.from_string(10, 2, "ab")
    assert bytes(s.buffer[:10]) == struct.pack("<HBBI", 10, 2, 6, 2) + b"ab"


def test_get_string_stops_at_nul():
    s = Structure.from_string(1, 1, "ab\0cd")
    assert s.get_string() == "ab"


def test_init_by_size_header():
    s = Structure()
    s.init_by_size(300, 7, 11, 40)
    assert (s.group, s.item, s.kind) == (300, 7, 11)
    assert s.size() == 40
    assert s.header_size() == 0
    assert len(s.buffer) >= 48


def test_header_and_data_sizes():
    s = Structure()
    s.init_by_size(1, 1, 1, 0)
    s.set_header_size(5)
    s.set_data_size(20)
    assert s.header_size() == 5
    assert s.size() == 25
    assert s.data_size() == 20


def test_set_size_keeps_header_size():
    s = Structure()
    s.init_by_size(1, 1, 1, 0)
    s.set_header_size(3)
    s.set_size(30)
    assert s.header_size() == 3
    assert s.size() == 30
    assert s.data_size() == 27


@pytest.mark.parametrize(
    "put, get, value",
    [
        ("put_int_at", "get_int_at", -123456),
        ("put_short_at", "get_short_at", -1234),
        ("put_byte_at", "get_byte_at", -5),
        ("put_float_at", "get_float_at", 1.5),
        ("put_double_at", "get_double_at", -2.25),
        ("put_long_at", "get_long_at", -(2**40)),
    ],
)
def test_put_get_round_trip(put, get, value):
    s = Structure()
    s.init_by_size(1, 1, 1, 32)
    getattr(s, put)(4, value)
    assert getattr(s, get)(4) == value


def test_init_copies_buffer():
    source = Structure.from_string(5, 3, "hello")
    copy = Structure()
    copy.init(bytes(source.buffer[: 8 + source.size()]))
    assert copy.get_string() == "hello"
    assert (copy.group, copy.item, copy.kind) == (5, 3, 6)
    source.put_string("HELLO")
    assert copy.get_string() == "hello"


def test_show_reports_identifiers():
    s = Structure.from_string(42, 9, "x")
    text = s.show()
    assert text.startswith("structure : [")
    assert "42" in text and "9" in text


def test_composite_layout():
    c = Composite(5, 6, "bsifdl", 10)
    assert c.entries() == 6
    assert [c.entry_type(i) for i in range(6)] == [1, 2, 3, 4, 5, 8]
    assert (c.group, c.item, c.kind) == (5, 6, 10)
    assert c.format_length() == 6
    assert c.rows() == 0


def test_composite_single_int_row_size():
    c = Composite(1, 1, "i", 4)
    assert c.row_size() == 4


def test_composite_default_parse_identifiers():
    c = Composite()
    c.parse("ii")
    assert (c.group, c.item) == (134, 1)
    assert c.entries() == 2


def test_composite_put_get_round_trip():
    c = Composite(1, 2, "bsifl", 8)
    c.put_int(0, 0, -3)
    c.put_int(1, 0, -300)
    c.put_int(2, 0, 70000)
    c.put_float(3, 0, 2.5)
    c.put_long(4, 0, 2**40)
    c.put_int(2, 2, 9)
    assert c.rows() == 3
    assert c.get_int(0, 0) == -3
    assert c.get_int(1, 0) == -300
    assert c.get_int(2, 0) == 70000
    assert c.get_float(3, 0) == 2.5
    assert c.get_long(4, 0) == 2**40
    assert c.get_int(2, 2) == 9


def test_composite_row_out_of_range():
    c = Composite(1, 1, "i", 4)
    c.put_int(0, 0, 1)
    with pytest.raises(IndexError):
        c.get_int(0, 1)
    with pytest.raises(IndexError):
        c.get_float(0, 5)


def test_composite_type_errors():
    c = Composite(1, 1, "if", 4)
    with pytest.raises(TypeError):
        c.put_float(0, 0, 1.0)
    with pytest.raises(TypeError):
        c.put_int(1, 0, 1)
    c.put_float(1, 0, 1.0)
    with pytest.raises(TypeError):
        c.get_int(1, 0)


def test_composite_capacity_exceeded():
    c = Composite(1, 1, "i", 10)
    c.set_rows(10)
    assert c.rows() == 10
    with pytest.raises(ValueError):
        c.set_rows(100)


def test_composite_format_too_long():
    with pytest.raises(ValueError):
        Composite(1, 1, "i" * 130, 1)


def test_composite_reset():
    c = Composite(1, 1, "ii", 5)
    c.put_int(1, 3, 7)
    assert c.rows() == 4
    c.reset()
    assert c.rows() == 0
    assert c.format_length() == 2


def test_composite_notify_from_copied_buffer():
    c = Composite(3, 4, "sf", 6)
    c.put_int(0, 0, 12)
    c.put_float(1, 1, -0.5)
    other = Composite()
    other.init(bytes(c.buffer[: 8 + c.node_length()]))
    assert other.entries() == 2
    assert other.row_size() == c.row_size()
    assert other.rows() == 2
    assert other.get_int(0, 0) == 12
    assert other.get_float(1, 1) == -0.5


def test_composite_describe_contains_format():
    c = Composite(1, 1, "if", 3)
    c.put_int(0, 0, 5)
    text = c.describe()
    assert "[if]" in text
    assert "[composite] identifiers" in text