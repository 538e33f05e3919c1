"""Tests for number text handling."""

from decimal import Decimal

import pytest

from dynamo_transcoder.utils.number_format import NumberFormat


class TestNumberFormat:
    """Tests for NumberFormat class."""

    @pytest.mark.parametrize("text, expected", [
        ("42", 42),
        ("-7", -7),
        ("+3", 3),
        ("0", 0),
        ("9223372036854775808", 9223372036854775808),
    ])
    def test_parse_integers(self, text, expected):
        """Test that integer text parses to int."""
        result = NumberFormat.parse(text)

        assert result == expected
        assert type(result) is int

    @pytest.mark.parametrize("text", ["1.50", "-0.001", ".5", "1e5", "2.5E-3", "123.456"])
    def test_parse_decimals(self, text):
        """Test that fractional and exponent text parses to an exact Decimal."""
        result = NumberFormat.parse(text)

        assert isinstance(result, Decimal)
        assert result == Decimal(text)

    @pytest.mark.parametrize("text", ["", "abc", "123abc", "NaN", "Infinity", "1_000", " 1", "1.2.3", "--1"])
    def test_parse_rejects_non_numbers(self, text):
        """Test that anything but finite number text is rejected."""
        assert NumberFormat.parse(text) is None

    def test_parse_rejects_non_strings(self):
        """Test that only text is parsed."""
        assert NumberFormat.parse(42) is None

    def test_to_text(self):
        """Test rendering numbers as text."""
        assert NumberFormat.to_text(42) == "42"
        assert NumberFormat.to_text(Decimal("1.50")) == "1.50"
        assert NumberFormat.to_text(0.1) == "0.1"
        assert NumberFormat.to_text(1e100) == "1" + "0" * 100
        assert NumberFormat.to_text(1e-07) == "0.0000001"
        assert NumberFormat.to_text(0.0) == "0.0"

    def test_to_text_non_finite(self):
        """Test that non-finite numbers have no text."""
        assert NumberFormat.to_text(float("nan")) is None
        assert NumberFormat.to_text(float("-inf")) is None
        assert NumberFormat.to_text(Decimal("Infinity")) is None
        assert NumberFormat.to_text(Decimal("sNaN")) is None

    def test_is_finite(self):
        """Test finiteness checks."""
        assert NumberFormat.is_finite(1)
        assert NumberFormat.is_finite(1.5)
        assert NumberFormat.is_finite(Decimal("1.5"))
        assert not NumberFormat.is_finite(float("inf"))

    @pytest.mark.parametrize("text", [
        "0.0000001",
        "-0.0000001",
        "1.50",
        "100000",
        "123456789012345678901234567890.5",
        "12345678901234567890123456789012345678",
        "0.000000000000000000000000000000000000001",
    ])
    def test_canonical_text_reads_back_unchanged(self, text):
        """Test that plain number text survives parse and render."""
        assert NumberFormat.to_text(NumberFormat.parse(text)) == text

    @pytest.mark.parametrize("text, canonical", [
        ("+5", "5"),
        ("007", "7"),
        ("-0", "0"),
        ("1e5", "100000"),
        ("1E-7", "0.0000001"),
        ("2.5E-3", "0.0025"),
        (".5", "0.5"),
    ])
    def test_non_canonical_text_is_normalized(self, text, canonical):
        """Test that sign, leading zeros and exponents are normalized once."""
        rendered = NumberFormat.to_text(NumberFormat.parse(text))

        assert rendered == canonical
        assert NumberFormat.to_text(NumberFormat.parse(rendered)) == canonical

    def test_out_of_range_decimals_keep_exponent(self):
        """Test magnitudes DynamoDB cannot hold are not expanded."""
        assert NumberFormat.to_text(Decimal("1E-200")) == "1E-200"
        assert NumberFormat.to_text(Decimal("1E+200")) == "1E+200"
