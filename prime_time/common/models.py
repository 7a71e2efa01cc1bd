"""Pydantic models for isPrime requests and responses."""
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class PrimeRequest(BaseModel):
    """
    A validated isPrime request.

    Unknown fields are ignored. The number is normalized on validation:
    any non-integral JSON number becomes 0, integers are kept exactly.
    """

    method: Literal["isPrime"] = Field(..., description="Requested method, must be isPrime")
    number: int = Field(..., description="Normalized number to test for primality")

    # Plain validator so arbitrarily large ints never go through the core int coercion
    @field_validator("number", mode="plain")
    @classmethod
    def normalize_number(cls, v: Any) -> int:
        """Accept JSON numbers only, mapping every non-integer to 0."""
        # bool is a subclass of int but not a JSON number
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"number must be a JSON number, got {type(v).__name__}")
        if isinstance(v, float):
            return 0
        return v


class PrimeResponse(BaseModel):
    """A conforming isPrime response."""

    method: Literal["isPrime"] = Field(default="isPrime", description="Answered method")
    prime: bool = Field(..., description="Whether the requested number is prime")
