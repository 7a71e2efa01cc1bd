"""Test class RequestParser."""

import pytest

from prime_time.common.parser import MalformedRequestError, RequestParser, load_json


@pytest.mark.parametrize("line,expected", [
    (b'{"method":"isPrime","number":7}\n', 7),
    (b'{"method":"isPrime","number":-4}', -4),
    (b'{"number": 13, "method": "isPrime"}\n', 13),
    (b'{"method":"isPrime","number":7,"extra":[1,2,3]}\n', 7),
    ('{"method":"isPrime","number":11}  \n', 11),
])
def test_parse_valid(line, expected):
    """Well-formed requests yield their integer number."""
    assert RequestParser.parse(line) == expected


@pytest.mark.parametrize("line", [
    b'{"method":"isPrime","number":7.5}',
    b'{"method":"isPrime","number":7.0}',
    b'{"method":"isPrime","number":-3.25}',
    b'{"method":"isPrime","number":1e5}',
    b'{"method":"isPrime","number":1.5e999}',
    b'{"method":"isPrime","number":123456789012345678901234567890.5}',
])
def test_parse_non_integer_becomes_zero(line):
    """Any number written with a fraction or exponent is treated as 0."""
    assert RequestParser.parse(line) == 0


def test_parse_big_integer_is_exact():
    """Integers far beyond 64 bits keep every digit."""
    big = 2**200 + 1
    assert RequestParser.parse(f'{{"method":"isPrime","number":{big}}}') == big


def test_parse_integer_longer_than_int_digit_limit():
    """Digit strings past the int() conversion limit are still accepted."""
    digits = "7" * 6000
    number = RequestParser.parse('{"method":"isPrime","number":' + digits + "}")
    assert number % 10 == 7
    assert number.bit_length() > 19000


@pytest.mark.parametrize("line", [
    b"not json at all\n",
    b"\n",
    b"",
    b'{"method":"isPrime","number":7',
    b"[1, 2, 3]",
    b'"isPrime"',
    b"7",
    b"null",
    b'{"method":"wrong","number":7}',
    b'{"method":"isprime","number":7}',
    b'{"method":1,"number":7}',
    b'{"method":null,"number":7}',
    b'{"number":7}',
    b'{"method":"isPrime"}',
    b'{"method":"isPrime","number":"7"}',
    b'{"method":"isPrime","number":true}',
    b'{"method":"isPrime","number":null}',
    b'{"method":"isPrime","number":[7]}',
    b'{"method":"isPrime","number":NaN}',
    b'{"method":"isPrime","number":Infinity}',
    b"\xff\xfe{}",
    b"[" * 100000 + b"]" * 100000,
    b'{"method":"isPrime","number":7,"x":' + b"[" * 100000 + b"]" * 100000 + b"}",
])
def test_parse_invalid(line):
    """Anything but a well-formed request raises MalformedRequestError."""
    with pytest.raises(MalformedRequestError):
        RequestParser.parse(line)


def test_malformed_request_error_is_value_error():
    """Callers may catch the parser failure as a ValueError."""
    assert issubclass(MalformedRequestError, ValueError)


def test_parse_request_returns_model():
    """parse_request exposes the validated request."""
    request = RequestParser.parse_request(b'{"method":"isPrime","number":5,"id":1}')
    assert request.method == "isPrime"
    assert request.number == 5


@pytest.mark.parametrize("text,expected", [
    ("42", 42),
    ("-1.5", -1.5),
    ('{"a": [1, null]}', {"a": [1, None]}),
])
def test_load_json(text, expected):
    """load_json decodes standard JSON."""
    assert load_json(text) == expected


def test_load_json_rejects_constants():
    """NaN is not part of JSON."""
    with pytest.raises(ValueError):
        load_json("NaN")


def test_load_json_rejects_deep_nesting():
    """Nesting past the recursion limit is a ValueError, not a RecursionError."""
    with pytest.raises(ValueError, match="nested too deeply"):
        load_json("[" * 100000 + "]" * 100000)
