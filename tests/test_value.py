import pytest

from pyresp import EncodingError, Value, ValueType, encode


def sample_values():
    return [
        Value.null(),
        Value.null_array(),
        Value.string("OK"),
        Value.error("Err"),
        Value.integer(123),
        Value.bulk("Bulk String"),
        Value.buf_bulk(bytes([0, 100])),
        Value.array([Value.null(), Value.integer(123)]),
    ]


def test_1_is_null():
    assert Value.null().is_null()
    assert Value.null_array().is_null()
    for val in sample_values()[2:]:
        assert not val.is_null(), f"Expected non-null, got {val!r}"


def test_2_is_error():
    assert Value.error("").is_error()
    assert Value.error("Err").is_error()
    for val in sample_values():
        if val.type_ != ValueType.ERROR:
            assert not val.is_error(), f"Expected non-error, got {val!r}"


def test_3_encode_bytes():
    val = Value.string("OK正")
    assert val.encode() == bytes([43, 79, 75, 230, 173, 163, 13, 10])
    assert encode(val) == val.encode()
    assert val.to_encoded_string() == "+OK正\r\n"


def test_4_encode_each_variant():
    assert Value.null().to_encoded_string() == "$-1\r\n"
    assert Value.null_array().to_encoded_string() == "*-1\r\n"
    assert Value.error("error message").to_encoded_string() == "-error message\r\n"
    assert Value.integer(123456789).to_encoded_string() == ":123456789\r\n"
    assert Value.integer(-123456789).to_encoded_string() == ":-123456789\r\n"
    # length counts utf-8 bytes, not characters
    assert Value.bulk("OK正").to_encoded_string() == "$5\r\nOK正\r\n"
    assert Value.buf_bulk(b"OK").to_encoded_string() == "$2\r\nOK\r\n"
    assert Value.bulk("").to_encoded_string() == "$0\r\n\r\n"


def test_5_encode_array():
    assert Value.array([]).to_encoded_string() == "*0\r\n"

    val = Value.array([
        Value.null(),
        Value.null_array(),
        Value.string("OK"),
        Value.error("message"),
        Value.integer(123456789),
        Value.bulk("Hello"),
        Value.buf_bulk(b"OK"),
    ])
    expected = "*7\r\n$-1\r\n*-1\r\n+OK\r\n-message\r\n:123456789\r\n$5\r\nHello\r\n$2\r\nOK\r\n"
    assert val.to_encoded_string() == expected

    nested = Value.array([Value.array([Value.integer(1)]), Value.array([])])
    assert nested.encode() == b"*2\r\n*1\r\n:1\r\n*0\r\n"


def test_6_to_encoded_string_rejects_binary():
    val = Value.buf_bulk(b"\xff\xfe")
    assert val.encode() == b"$2\r\n\xff\xfe\r\n"
    with pytest.raises(EncodingError):
        val.to_encoded_string()


def test_7_bulk_and_buf_bulk_share_wire_form():
    assert Value.bulk("Hello").encode() == Value.buf_bulk(b"Hello").encode()
    assert Value.bulk("Hello") != Value.buf_bulk(b"Hello")


def test_8_display():
    assert str(Value.null()) == "(Null)"
    assert str(Value.null_array()) == "(Null Array)"
    assert str(Value.string("OK")) == '"OK"'
    assert str(Value.error("Err")) == '"Err"'
    assert str(Value.integer(123)) == "123"
    assert str(Value.bulk("Bulk String")) == '"Bulk String"'
    assert str(Value.buf_bulk(bytes([0, 100]))) == "<Buffer 00 64>"
    assert str(Value.buf_bulk(bytes(range(19)))) == \
        "<Buffer 00 01 02 03 04 05 06 07 08 09 0a 0b 0c 0d 0e 0f ... >"
    assert str(Value.array([Value.null(), Value.integer(123)])) == "1) (Null)\n2) 123\n"


def test_9_display_nested_arrays():
    inner = sample_values()
    middle = inner + [Value.array(inner), Value.null()]
    outer = middle + [Value.array(middle), Value.null()]

    expected = """1) (Null)
2) (Null Array)
3) "OK"
4) "Err"
5) 123
6) "Bulk String"
7) <Buffer 00 64>
8)
  1) (Null)
  2) 123
9)
  1) (Null)
  2) (Null Array)
  3) "OK"
  4) "Err"
  5) 123
  6) "Bulk String"
  7) <Buffer 00 64>
  8)
    1) (Null)
    2) 123
10) (Null)
11)
  1) (Null)
  2) (Null Array)
  3) "OK"
  4) "Err"
  5) 123
  6) "Bulk String"
  7) <Buffer 00 64>
  8)
    1) (Null)
    2) 123
  9)
    1) (Null)
    2) (Null Array)
    3) "OK"
    4) "Err"
    5) 123
    6) "Bulk String"
    7) <Buffer 00 64>
    8)
      1) (Null)
      2) 123
  10) (Null)
12) (Null)
"""
    assert str(Value.array(outer)) == expected


def test_10_text_variants_reject_bytes():
    for make in (Value.string, Value.error, Value.bulk):
        with pytest.raises(TypeError):
            make(b"raw")
    assert Value.buf_bulk(bytearray(b"raw")).encode() == b"$3\r\nraw\r\n"
