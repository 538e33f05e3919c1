"""Main DynamoDB transcoder implementation."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional, Type, TypeVar

from boto3.dynamodb.types import MAP

from .config import TranscoderConfig
from .error_handler import ErrorHandler
from .structural import StructuralCodec
from .typed_transcoder import TypedTranscoder
from .types import AttributeValue, EncodeError, GenericValue
from .utils.size_calculator import MAX_ITEM_SIZE, AttributeSizeCalculator
from .utils.validation import ValidationUtils
from .value_transcoder import ValueTranscoder


T = TypeVar("T")


class DynamoTranscoder:
    """
    Converts between JSON-like values, typed records and DynamoDB attributes.

    Wires the value transcoder, the typed transcoder and the item size
    calculator to one configuration and one logger. Instances hold no
    per-call state and can be shared between threads.
    """

    def __init__(self, config: Optional[TranscoderConfig] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the transcoder.

        Args:
            config: Optional TranscoderConfig instance
            logger: Optional logger instance
        """
        self.config = config or TranscoderConfig()
        self.logger = logger or logging.getLogger(__name__)

        self.error_handler = ErrorHandler(self.config, self.logger)
        self.value_transcoder = ValueTranscoder(self.config, self.logger, self.error_handler)
        self.typed_transcoder = TypedTranscoder(
            value_transcoder=self.value_transcoder,
            codec=StructuralCodec(self.config, self.logger, self.error_handler),
            config=self.config,
            logger=self.logger,
        )
        self.size_calculator = AttributeSizeCalculator(self.logger)

    def marshall(self, value: GenericValue) -> AttributeValue:
        """Convert a generic value into an attribute value."""
        return self.value_transcoder.to_attribute(value)

    def unmarshall(self, attribute: AttributeValue) -> GenericValue:
        """
        Convert an attribute value into a generic value.

        SS, NS and BS attributes come back as lists; marshalling the result
        yields an L attribute, not the original set.
        """
        return self.value_transcoder.to_value(attribute)

    def marshall_t(self, record: Any) -> AttributeValue:
        """Encode a typed record into an attribute value. Raises EncodeError."""
        return self.typed_transcoder.marshall_t(record)

    def unmarshall_t(self, attribute: AttributeValue, target_type: Type[T]) -> T:
        """Decode an attribute value into target_type. Raises DecodeError."""
        return self.typed_transcoder.unmarshall_t(attribute, target_type)

    def marshall_item(self, item: Dict[str, Any]) -> Dict[str, AttributeValue]:
        """
        Convert a top-level item into the mapping put_item expects.

        Args:
            item: Dict with str keys

        Returns:
            Mapping of attribute name to attribute value

        Raises:
            TypeError: If item is not a dict
        """
        if not isinstance(item, dict):
            raise TypeError(f"Item must be a dict, got {type(item).__name__}")

        ValidationUtils.validate_item_keys(item)
        attribute = self.value_transcoder.to_attribute(item)
        self.logger.debug(f"Marshalled item with {len(item)} attributes")
        return attribute[MAP]

    def unmarshall_item(self, item: Dict[str, AttributeValue]) -> Dict[str, Any]:
        """
        Convert an item returned by get_item / query into a plain dict.

        Args:
            item: Mapping of attribute name to attribute value

        Returns:
            Dict of generic values

        Raises:
            TypeError: If item is not a dict
        """
        if not isinstance(item, dict):
            raise TypeError(f"Item must be a dict, got {type(item).__name__}")

        return self.value_transcoder.to_value({MAP: item})

    def marshall_item_t(self, record: Any) -> Dict[str, AttributeValue]:
        """Encode a typed record into the mapping put_item expects."""
        attribute = self.typed_transcoder.marshall_t(record)
        if MAP not in attribute:
            raise EncodeError(f"{type(record).__name__} does not encode to a map")
        return attribute[MAP]

    def unmarshall_item_t(self, item: Dict[str, AttributeValue], target_type: Type[T]) -> T:
        """Decode an item returned by get_item / query into target_type."""
        return self.typed_transcoder.unmarshall_t({MAP: item}, target_type)

    def item_size(self, item: Dict[str, AttributeValue]) -> int:
        """Estimate the stored size of a marshalled item in bytes."""
        return self.size_calculator.calculate_item_size(item)

    def fits_item_limit(self, item: Dict[str, AttributeValue], limit: int = MAX_ITEM_SIZE) -> bool:
        """Check that a marshalled item is within DynamoDB's item size limit."""
        return not self.size_calculator.exceeds_item_limit(item, limit)


@lru_cache(maxsize=1)
def default_transcoder() -> DynamoTranscoder:
    """Shared transcoder with the default configuration."""
    return DynamoTranscoder()


def marshall(value: GenericValue) -> AttributeValue:
    """Convert a generic value into an attribute value."""
    return default_transcoder().marshall(value)


def unmarshall(attribute: AttributeValue) -> GenericValue:
    """Convert an attribute value into a generic value (sets become lists)."""
    return default_transcoder().unmarshall(attribute)


def marshall_t(record: Any) -> AttributeValue:
    """Encode a typed record into an attribute value."""
    return default_transcoder().marshall_t(record)


def unmarshall_t(attribute: AttributeValue, target_type: Type[T]) -> T:
    """Decode an attribute value into an instance of target_type."""
    return default_transcoder().unmarshall_t(attribute, target_type)


def marshall_item(item: Dict[str, Any]) -> Dict[str, AttributeValue]:
    """Convert a top-level item into the mapping put_item expects."""
    return default_transcoder().marshall_item(item)


def unmarshall_item(item: Dict[str, AttributeValue]) -> Dict[str, Any]:
    """Convert an item returned by get_item / query into a plain dict."""
    return default_transcoder().unmarshall_item(item)
