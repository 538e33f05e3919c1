"""Pytest configuration and fixtures."""

import pytest

from dynamo_transcoder import DynamoTranscoder, TranscoderConfig


@pytest.fixture
def transcoder():
    """Transcoder with the default configuration."""
    return DynamoTranscoder()


@pytest.fixture
def strict_transcoder():
    """Transcoder that raises instead of degrading anomalous input."""
    return DynamoTranscoder(TranscoderConfig(strict=True))


@pytest.fixture
def sample_nested_json():
    """Nested JSON-like value."""
    return {
        "hello": "world",
        "n": 42,
        "some": {
            "deep": {
                "value": 42
            }
        }
    }


@pytest.fixture
def sample_nested_attribute():
    """Attribute form of sample_nested_json."""
    return {
        "M": {
            "hello": {"S": "world"},
            "n": {"N": "42"},
            "some": {
                "M": {
                    "deep": {
                        "M": {
                            "value": {"N": "42"}
                        }
                    }
                }
            }
        }
    }


@pytest.fixture
def sample_mixed_json():
    """Mixed structure JSON-like value with every supported variant."""
    return {
        "someField": None,
        "otherField": 42,
        "arrayField": [None, 1, True, "string"],
        "trueVal": True,
        "falseVal": False,
        "mixedArray": [True, False, 123, "hello", {"nested": "object"}],
        "level1": {
            "level2": {
                "level3": {
                    "value": 999
                }
            }
        },
        "emptyList": [],
        "emptyMap": {},
        "unicode": "こんにちは世界 😀🔥",
    }
