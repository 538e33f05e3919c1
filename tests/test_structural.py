"""Tests for the structural codec."""

from collections import OrderedDict
from decimal import Decimal
from enum import Enum
from typing import Dict
from uuid import UUID

import pytest
from pydantic import BaseModel, Field

from dynamo_transcoder.structural import Structural, StructuralCodec
from dynamo_transcoder.types import DecodeError, DecodeErrorKind, EncodeError


class Point(Structural):
    """Hand-written mapping."""

    def __init__(self, x: int, y: int):
        self.x = x
        self.y = y

    def __eq__(self, other):
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)

    def to_generic_value(self):
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_generic_value(cls, value):
        return cls(int(value["x"]), int(value["y"]))


class Refusing(Structural):
    """Mapping that refuses to encode."""

    def to_generic_value(self):
        raise EncodeError("refusing to encode", path=("secret",))

    @classmethod
    def from_generic_value(cls, value):
        raise DecodeError([])


class Priority(str, Enum):
    LOW = "low"
    HIGH = "high"


class Aliased(BaseModel):
    user_id: str = Field(alias="userId")


class Ledger(BaseModel):
    amount: Decimal
    ref: UUID
    by_priority: Dict[Priority, str]
    by_level: Dict[int, str]
    tags: set = set()


class TestStructuralCodec:
    """Tests for StructuralCodec."""

    def setup_method(self):
        """Set up test fixtures."""
        self.codec = StructuralCodec()

    def test_hand_written_mapping(self):
        """Test encode/decode through the Structural capability."""
        point = Point(3, 4)

        assert self.codec.encode(point) == {"x": 3, "y": 4}
        assert self.codec.decode({"x": 3, "y": 4}, Point) == point

    def test_hand_written_missing_field(self):
        """Test that KeyError becomes a missing-field error."""
        with pytest.raises(DecodeError) as exc_info:
            self.codec.decode({"x": 3}, Point)

        assert exc_info.value.kinds == [DecodeErrorKind.MISSING_FIELD]
        assert exc_info.value.paths == [("y",)]

    def test_hand_written_wrong_shape(self):
        """Test that TypeError becomes a type mismatch."""
        with pytest.raises(DecodeError) as exc_info:
            self.codec.decode(None, Point)

        assert exc_info.value.kinds == [DecodeErrorKind.TYPE_MISMATCH]

    def test_hand_written_bad_value(self):
        """Test that ValueError becomes an invalid value."""
        with pytest.raises(DecodeError) as exc_info:
            self.codec.decode({"x": "three", "y": 4}, Point)

        assert exc_info.value.kinds == [DecodeErrorKind.INVALID_VALUE]

    def test_refusal_propagates(self):
        """Test that a mapping's own EncodeError is kept as is."""
        with pytest.raises(EncodeError) as exc_info:
            self.codec.encode(Refusing())

        assert exc_info.value.path == ("secret",)

    def test_aliases_used_on_both_sides(self):
        """Test that field aliases name the stored attributes."""
        encoded = self.codec.encode(Aliased(userId="u1"))

        assert encoded == {"userId": "u1"}
        assert self.codec.decode(encoded, Aliased) == Aliased(userId="u1")

    def test_normalizes_python_values(self):
        """Test reduction of pydantic's python-mode output."""
        ledger = Ledger(
            amount=Decimal("10.25"),
            ref=UUID("12345678-1234-5678-1234-567812345678"),
            by_priority={Priority.HIGH: "urgent"},
            by_level={2: "two"},
            tags={"only"},
        )

        encoded = self.codec.encode(ledger)

        assert encoded == {
            "amount": Decimal("10.25"),
            "ref": "12345678-1234-5678-1234-567812345678",
            "by_priority": {"high": "urgent"},
            "by_level": {"2": "two"},
            "tags": ["only"],
        }
        assert self.codec.decode(encoded, Ledger) == ledger

    def test_plain_containers(self):
        """Test encoding values that are not records."""
        assert self.codec.encode(OrderedDict(a=1)) == {"a": 1}
        assert self.codec.encode((1, 2)) == [1, 2]

    def test_non_finite_decimal(self):
        """Test that Decimal NaN is refused."""
        with pytest.raises(EncodeError):
            self.codec.encode({"amount": Decimal("NaN")})

    def test_unusable_key(self):
        """Test map keys that cannot become attribute names."""
        with pytest.raises(EncodeError):
            self.codec.encode({(1, 2): "pair"})
