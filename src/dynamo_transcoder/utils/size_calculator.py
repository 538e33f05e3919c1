"""Size calculation utilities for DynamoDB attribute trees."""

import base64
import binascii
import logging
from typing import Any, Dict, Optional

from boto3.dynamodb.types import Binary

from ..types import AttributeType, AttributeValue


# DynamoDB rejects items larger than 400 KB
MAX_ITEM_SIZE = 400 * 1024


class AttributeSizeCalculator:
    """
    Utility class estimating the stored size of attribute values.

    Follows DynamoDB's published sizing rules: strings and binaries count
    their byte length, numbers roughly one byte per two significant digits
    plus one, NULL and BOOL one byte, and lists and maps three bytes plus
    one byte per element on top of their contents. Attribute names count
    as UTF-8 bytes.
    """

    CONTAINER_OVERHEAD = 3
    ELEMENT_OVERHEAD = 1
    SCALAR_FLAG_SIZE = 1

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the size calculator.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def calculate_item_size(self, item: Dict[str, AttributeValue]) -> int:
        """
        Calculate the size of a top-level item.

        Args:
            item: Mapping of attribute name to attribute value

        Returns:
            Size in bytes

        Raises:
            ValueError: If the item holds a malformed attribute
        """
        return sum(
            self._name_size(name) + self.calculate_attribute_size(attribute)
            for name, attribute in item.items()
        )

    def calculate_attribute_size(self, attribute: AttributeValue) -> int:
        """
        Calculate the size of a single attribute value.

        Args:
            attribute: Attribute value in the low-level client shape

        Returns:
            Size in bytes

        Raises:
            ValueError: If the attribute is malformed
        """
        if not isinstance(attribute, dict) or len(attribute) != 1:
            raise ValueError(f"Attribute must be a single-key dict, got {attribute!r}")

        (tag, payload), = attribute.items()
        attribute_type = AttributeType.from_tag(tag)

        if attribute_type in (AttributeType.NULL, AttributeType.BOOL):
            return self.SCALAR_FLAG_SIZE
        if attribute_type == AttributeType.S:
            return self._string_size(payload)
        if attribute_type == AttributeType.N:
            return self._number_size(payload)
        if attribute_type == AttributeType.B:
            return self._binary_size(payload)
        if attribute_type == AttributeType.SS:
            return sum(self._string_size(item) for item in self._members(tag, payload))
        if attribute_type == AttributeType.NS:
            return sum(self._number_size(item) for item in self._members(tag, payload))
        if attribute_type == AttributeType.BS:
            return sum(self._binary_size(item) for item in self._members(tag, payload))
        if attribute_type == AttributeType.L:
            return self.CONTAINER_OVERHEAD + sum(
                self.ELEMENT_OVERHEAD + self.calculate_attribute_size(item)
                for item in self._members(tag, payload)
            )
        if attribute_type == AttributeType.M:
            if not isinstance(payload, dict):
                raise ValueError(f"M payload must be a dict, got {type(payload).__name__}")
            return self.CONTAINER_OVERHEAD + sum(
                self.ELEMENT_OVERHEAD + self._name_size(name) + self.calculate_attribute_size(item)
                for name, item in payload.items()
            )

        raise ValueError(f"Unknown attribute type {tag!r}")

    def exceeds_item_limit(self, item: Dict[str, AttributeValue],
                           limit: int = MAX_ITEM_SIZE) -> bool:
        """
        Check whether an item is too large to store.

        Args:
            item: Mapping of attribute name to attribute value
            limit: Size limit in bytes

        Returns:
            True if the item is larger than the limit
        """
        size = self.calculate_item_size(item)
        if size > limit:
            self.logger.warning(f"Item size {size} bytes ({size/1024:.1f}KB) exceeds limit of {limit} bytes")
            return True
        return False

    @staticmethod
    def _name_size(name: Any) -> int:
        if not isinstance(name, str):
            raise ValueError(f"Attribute name must be a str, got {name!r}")
        return len(name.encode("utf-8"))

    @staticmethod
    def _string_size(text: Any) -> int:
        if not isinstance(text, str):
            raise ValueError(f"String payload must be a str, got {type(text).__name__}")
        return len(text.encode("utf-8"))

    @staticmethod
    def _members(tag: str, payload: Any) -> Any:
        if not isinstance(payload, (list, tuple, set, frozenset)):
            raise ValueError(f"{tag} payload must be a list, got {type(payload).__name__}")
        return payload

    @staticmethod
    def _number_size(text: Any) -> int:
        """Approximate size of a number: one byte per two significant digits, plus one."""
        if not isinstance(text, str):
            raise ValueError(f"Number payload must be a str, got {type(text).__name__}")
        mantissa = text.lstrip("+-").split("e")[0].split("E")[0]
        digits = mantissa.replace(".", "").strip("0")
        return (max(len(digits), 1) + 1) // 2 + 1

    @staticmethod
    def _binary_size(payload: Any) -> int:
        if isinstance(payload, Binary):
            return len(payload.value)
        if isinstance(payload, (bytes, bytearray)):
            return len(payload)
        if isinstance(payload, str):
            try:
                return len(base64.b64decode(payload, validate=True))
            except (binascii.Error, ValueError):
                raise ValueError(f"Binary payload is not valid base64: {payload!r}")
        raise ValueError(f"Unsupported binary payload of type {type(payload).__name__}")
