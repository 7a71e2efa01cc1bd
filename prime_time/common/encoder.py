"""Render isPrime responses to wire bytes."""
from prime_time.common.models import PrimeResponse

MALFORMED_RESPONSE: bytes = b"{}\n"


class ResponseEncoder:
    """Encode the two response shapes of the protocol, one line each."""

    @staticmethod
    def conforming(prime: bool) -> bytes:
        """
        Encode a result line.

        :param bool prime: Primality result

        :return: {"method":"isPrime","prime":<bool>} followed by a newline
        :rtype: bytes
        """
        return PrimeResponse(prime=prime).model_dump_json().encode("utf-8") + b"\n"

    @staticmethod
    def malformed() -> bytes:
        """
        Encode the malformed request marker.

        :return: {} followed by a newline
        :rtype: bytes
        """
        return MALFORMED_RESPONSE
