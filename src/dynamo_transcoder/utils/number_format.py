"""Decimal-text handling for DynamoDB number attributes."""

import math
import re
from decimal import Decimal
from typing import Optional, Union


Number = Union[int, Decimal, float]

_INTEGER_RE = re.compile(r"[+-]?\d+")
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# DynamoDB stores magnitudes from 1E-130 up to 9.99E+125
MIN_PLAIN_EXPONENT = -130
MAX_PLAIN_EXPONENT = 125


class NumberFormat:
    """Utility class converting between numbers and their decimal text."""

    @staticmethod
    def is_finite(value: Number) -> bool:
        """Check whether a number can be stored (no NaN or Infinity)."""
        if isinstance(value, Decimal):
            return value.is_finite()
        if isinstance(value, float):
            return math.isfinite(value)
        return True

    @staticmethod
    def to_text(value: Number) -> Optional[str]:
        """
        Render a number as decimal text without losing precision.

        Decimals and floats within DynamoDB's range are written in plain
        positional notation, the form DynamoDB returns, so exponent text
        such as "1E-7" comes out as "0.0000001". Digits, including trailing
        zeros, are kept as given.

        Args:
            value: int, Decimal or float to render

        Returns:
            Decimal text, or None when the number is not finite
        """
        if not NumberFormat.is_finite(value):
            return None

        if isinstance(value, float):
            # repr gives the shortest text that reads back to the same float
            value = Decimal(repr(value))

        if isinstance(value, Decimal):
            if MIN_PLAIN_EXPONENT <= value.adjusted() <= MAX_PLAIN_EXPONENT:
                return format(value, "f")
            return str(value)

        return str(value)

    @staticmethod
    def parse(text: str) -> Optional[Union[int, Decimal]]:
        """
        Parse decimal text into an exact number.

        Integer text becomes an int (arbitrary size). Text with a fraction
        or exponent becomes a Decimal carrying exactly the digits given.
        A leading "+", leading zeros and exponent notation are not kept, so
        to_text of the result is canonical: "+5" and "007" give "5" and "7",
        "1e5" gives "100000". Canonical text reads back unchanged.

        Args:
            text: Number text as stored in an N attribute

        Returns:
            int or Decimal, or None when the text is not a finite number
        """
        if not isinstance(text, str):
            return None

        if _INTEGER_RE.fullmatch(text):
            try:
                return int(text)
            except ValueError:
                # Beyond the interpreter's int digit limit
                return Decimal(text)

        if _DECIMAL_RE.fullmatch(text):
            return Decimal(text)

        return None
