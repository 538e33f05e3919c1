"""Tests for the DynamoTranscoder facade and item helpers."""

import logging
from typing import List

import pytest
from pydantic import BaseModel

import dynamo_transcoder
from dynamo_transcoder import (
    DecodeError,
    DynamoTranscoder,
    EncodeError,
    TranscoderConfig,
    UnsupportedAttributeError,
    UnsupportedValueError,
)
from dynamo_transcoder.transcoder import default_transcoder


class User(BaseModel):
    pk: str
    age: int
    tags: List[str] = []


class TestDynamoTranscoder:
    """Tests for DynamoTranscoder class."""

    def test_initialization(self):
        """Test transcoder initialization."""
        logger = logging.getLogger("custom")
        transcoder = DynamoTranscoder(TranscoderConfig(max_depth=8), logger)

        assert transcoder.config.max_depth == 8
        assert transcoder.logger is logger
        assert transcoder.value_transcoder.config is transcoder.config
        assert transcoder.typed_transcoder.value_transcoder is transcoder.value_transcoder

    def test_marshall_unmarshall(self, transcoder, sample_mixed_json):
        """Test a round trip through the facade."""
        attribute = transcoder.marshall(sample_mixed_json)

        assert attribute["M"]["arrayField"]["L"][0] == {"NULL": True}
        assert transcoder.unmarshall(attribute) == sample_mixed_json

    def test_typed_round_trip(self, transcoder):
        """Test the typed entry points of the facade."""
        user = User(pk="u#1", age=30, tags=["a"])

        attribute = transcoder.marshall_t(user)

        assert attribute == {"M": {
            "pk": {"S": "u#1"},
            "age": {"N": "30"},
            "tags": {"L": [{"S": "a"}]},
        }}
        assert transcoder.unmarshall_t(attribute, User) == user

    def test_strict_fixture(self, strict_transcoder):
        """Test that strict mode raises for anomalies."""
        with pytest.raises(UnsupportedAttributeError):
            strict_transcoder.unmarshall({"M": {"a": {"Q": 1}}})

        with pytest.raises(UnsupportedValueError):
            strict_transcoder.marshall(float("inf"))


class TestItemHelpers:
    """Tests for item-level helpers."""

    def setup_method(self):
        """Set up test fixtures."""
        self.transcoder = DynamoTranscoder()

    def test_marshall_item(self):
        """Test that items lose the outer map wrapper."""
        item = self.transcoder.marshall_item({"pk": "u#1", "count": 2})

        assert item == {"pk": {"S": "u#1"}, "count": {"N": "2"}}

    def test_unmarshall_item(self):
        """Test reading an item in the shape get_item returns it."""
        item = {"pk": {"S": "u#1"}, "flags": {"SS": ["x", "y"]}}

        assert self.transcoder.unmarshall_item(item) == {"pk": "u#1", "flags": ["x", "y"]}

    @pytest.mark.parametrize("bad", [["pk"], "pk", None])
    def test_items_must_be_dicts(self, bad):
        """Test rejection of non-dict items."""
        with pytest.raises(TypeError):
            self.transcoder.marshall_item(bad)
        with pytest.raises(TypeError):
            self.transcoder.unmarshall_item(bad)

    def test_item_keys_must_be_text(self):
        """Test rejection of non-str attribute names."""
        with pytest.raises(UnsupportedValueError):
            self.transcoder.marshall_item({1: "one"})

    def test_typed_items(self):
        """Test typed item helpers."""
        user = User(pk="u#2", age=41)

        item = self.transcoder.marshall_item_t(user)

        assert item["pk"] == {"S": "u#2"}
        assert self.transcoder.unmarshall_item_t(item, User) == user

    def test_typed_item_must_be_a_map(self):
        """Test records that do not encode to a map."""
        with pytest.raises(EncodeError, match="does not encode to a map"):
            self.transcoder.marshall_item_t([1, 2])

    def test_typed_item_decode_failure(self):
        """Test decode failures of typed items."""
        with pytest.raises(DecodeError):
            self.transcoder.unmarshall_item_t({"pk": {"S": "u#3"}}, User)

    def test_item_size(self):
        """Test size estimation of marshalled items."""
        item = self.transcoder.marshall_item({"pk": "abc", "flag": True})

        assert self.transcoder.item_size(item) == (2 + 3) + (4 + 1)
        assert self.transcoder.fits_item_limit(item)
        assert not self.transcoder.fits_item_limit(item, limit=5)


class TestModuleFunctions:
    """Tests for the module-level convenience functions."""

    def test_default_transcoder_is_shared(self):
        """Test that the default transcoder is built once."""
        assert default_transcoder() is default_transcoder()

    def test_functions(self):
        """Test the package-level entry points."""
        attribute = dynamo_transcoder.marshall({"a": [1, "b"]})

        assert attribute == {"M": {"a": {"L": [{"N": "1"}, {"S": "b"}]}}}
        assert dynamo_transcoder.unmarshall(attribute) == {"a": [1, "b"]}

        item = dynamo_transcoder.marshall_item({"pk": "x"})
        assert dynamo_transcoder.unmarshall_item(item) == {"pk": "x"}

        user = User(pk="u#4", age=7)
        assert dynamo_transcoder.unmarshall_t(dynamo_transcoder.marshall_t(user), User) == user
