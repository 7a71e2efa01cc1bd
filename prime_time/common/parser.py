"""Parse and validate isPrime request lines."""
from decimal import Decimal
import json
from typing import Any, Union

from pydantic import ValidationError

from prime_time.common.models import PrimeRequest


class MalformedRequestError(ValueError):
    """Raised when a request line is not a valid isPrime request."""


def _parse_int(text: str) -> int:
    """
    Convert a JSON integer literal to an int of any length.

    int(str) refuses very long digit strings, the Decimal route does not.

    :param str text: JSON integer literal

    :return: Exact integer value
    :rtype: int
    """
    return int(Decimal(text))


def _reject_constant(name: str) -> Any:
    """NaN and Infinity are not JSON."""
    raise ValueError(f"Invalid JSON constant: {name}")


def load_json(text: str) -> Any:
    """
    Decode strict JSON text, keeping integers exact whatever their size.

    :param str text: JSON document

    :return: Decoded JSON value
    :raises ValueError: If the text is not valid JSON or is nested too deeply to decode
    """
    try:
        return json.loads(text, parse_int=_parse_int, parse_constant=_reject_constant)
    except RecursionError as exc:
        raise ValueError("JSON nested too deeply") from exc


class RequestParser:
    """
    Turn one request line into a query number.

    Algorithm:
        1. Decode the line as UTF-8
        2. Parse it as a JSON value
        3. Validate it into a PrimeRequest (object with method and number)
        4. Return the normalized number

    Every failure is reported as a MalformedRequestError, there is no partial result.
    """

    @staticmethod
    def decode(line: Union[bytes, str]) -> str:
        """
        Decode a raw line to text.

        :param line: Raw line read from the connection

        :return: Line as text
        :rtype: str
        :raises MalformedRequestError: If the bytes are not UTF-8
        """
        if isinstance(line, str):
            return line
        try:
            return line.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedRequestError(f"Request is not UTF-8: {exc}") from exc

    @staticmethod
    def parse_request(line: Union[bytes, str]) -> PrimeRequest:
        """
        Parse a line into a validated PrimeRequest.

        :param line: One request line, trailing newline optional

        :return: Validated request
        :rtype: PrimeRequest
        :raises MalformedRequestError: If the line is not a valid request
        """
        text: str = RequestParser.decode(line)
        try:
            value: Any = load_json(text)
        except ValueError as exc:
            raise MalformedRequestError(f"Invalid JSON: {exc}") from exc

        if not isinstance(value, dict):
            raise MalformedRequestError(f"Request must be a JSON object, got {type(value).__name__}")

        try:
            return PrimeRequest.model_validate(value)
        except ValidationError as exc:
            raise MalformedRequestError(f"Invalid request: {exc.error_count()} validation error(s)") from exc

    @staticmethod
    def parse(line: Union[bytes, str]) -> int:
        """
        Parse a line and return the number to test.

        :param line: One request line, trailing newline optional

        :return: Query number (0 for any non-integral number)
        :rtype: int
        :raises MalformedRequestError: If the line is not a valid request
        """
        return RequestParser.parse_request(line).number
