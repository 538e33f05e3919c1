"""Value transcoder between generic value trees and DynamoDB attribute trees."""

import base64
import binascii
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Set

from boto3.dynamodb.types import BINARY, BOOLEAN, LIST, MAP, NULL, NUMBER, STRING, Binary

from .config import TranscoderConfig
from .error_handler import ErrorHandler
from .types import (
    AttributeType,
    AttributeValue,
    BinaryMode,
    GenericValue,
    Path,
    UnsupportedValueError,
    ValueTranscoderInterface,
    format_path,
)
from .utils.number_format import NumberFormat
from .utils.validation import ValidationUtils


class ValueTranscoder(ValueTranscoderInterface):
    """
    Bidirectional transcoder for generic value trees.

    Maps None, bool, numbers, str, list and dict onto the NULL, BOOL, N,
    S, L and M attribute variants and back. The reverse direction also
    accepts the store-native set variants, which come back as plain
    lists: set-ness is discarded and a re-marshalled value is an L, never
    an SS/NS/BS. Anomalous attributes degrade to None unless the config
    is strict.
    """

    def __init__(self, config: Optional[TranscoderConfig] = None,
                 logger: Optional[logging.Logger] = None,
                 error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the value transcoder.

        Args:
            config: Optional TranscoderConfig instance
            logger: Optional logger instance
            error_handler: Optional ErrorHandler instance
        """
        self.config = config or TranscoderConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.config, self.logger)

        self._decoders = {
            AttributeType.NULL: self._decode_null,
            AttributeType.BOOL: self._decode_bool,
            AttributeType.N: self._decode_number,
            AttributeType.S: self._decode_string,
            AttributeType.B: self._decode_binary,
            AttributeType.L: self._decode_list,
            AttributeType.M: self._decode_map,
            AttributeType.SS: self._decode_set,
            AttributeType.NS: self._decode_set,
            AttributeType.BS: self._decode_set,
        }

    def to_attribute(self, value: GenericValue) -> AttributeValue:
        """
        Convert a generic value into an attribute value.

        Args:
            value: None, bool, int, Decimal, float, str, list/tuple or dict
                with str keys (bytes pass through as B)

        Returns:
            Attribute value in the low-level client shape

        Raises:
            UnsupportedValueError: If the tree holds a type outside the value model
            NestingDepthError: If the tree nests deeper than config.max_depth
            CircularReferenceError: If a container contains itself
        """
        return self._encode(value, (), set())

    def to_value(self, attribute: AttributeValue) -> GenericValue:
        """
        Convert an attribute value into a generic value.

        Args:
            attribute: Attribute value in the low-level client shape

        Returns:
            The generic value; numbers come back as int or Decimal

        Raises:
            NestingDepthError: If the tree nests deeper than config.max_depth
            CircularReferenceError: If a container contains itself
            UnsupportedAttributeError: In strict mode, for attributes outside the grammar
        """
        return self._decode(attribute, (), set())

    # Generic value -> attribute

    def _encode(self, value: Any, path: Path, active: Set[int]) -> AttributeValue:
        if value is None:
            return {NULL: True}

        if isinstance(value, bool):
            return {BOOLEAN: value}

        if isinstance(value, (int, Decimal, float)):
            return self._encode_number(value, path)

        if isinstance(value, str):
            return {STRING: str(value)}

        if isinstance(value, (bytes, bytearray)):
            return {BINARY: bytes(value)}

        if isinstance(value, Binary):
            return {BINARY: value.value}

        if isinstance(value, (list, tuple)):
            ValidationUtils.enter_container(value, path, active, self.config.max_depth)
            try:
                return {LIST: [self._encode(item, path + (index,), active)
                               for index, item in enumerate(value)]}
            finally:
                ValidationUtils.leave_container(value, active)

        if isinstance(value, dict):
            ValidationUtils.validate_item_keys(value, path)
            ValidationUtils.enter_container(value, path, active, self.config.max_depth)
            try:
                return {MAP: {key: self._encode(item, path + (key,), active)
                              for key, item in value.items()}}
            finally:
                ValidationUtils.leave_container(value, active)

        raise UnsupportedValueError(
            f'Unsupported type "{type(value).__name__}" at {format_path(path)}', path
        )

    def _encode_number(self, value: Any, path: Path) -> AttributeValue:
        if isinstance(value, int):
            # int() drops IntEnum and other subclasses' custom str()
            try:
                return {NUMBER: str(int(value))}
            except ValueError as e:
                # Past the interpreter's int-to-str digit limit
                return self.error_handler.handle_unsupported_value(
                    f"integer cannot be rendered as text ({e})", path
                )

        text = NumberFormat.to_text(value)
        if text is None:
            return self.error_handler.handle_unsupported_value(
                f"non-finite number {value!r} cannot be stored", path
            )
        return {NUMBER: text}

    # Attribute -> generic value

    def _decode(self, attribute: Any, path: Path, active: Set[int]) -> GenericValue:
        if not isinstance(attribute, dict) or len(attribute) != 1:
            return self.error_handler.handle_unsupported_attribute(
                "attribute must be a dict with exactly one type tag", path, attribute
            )

        (tag, payload), = attribute.items()
        attribute_type = AttributeType.from_tag(tag)
        if attribute_type is None:
            return self.error_handler.handle_unsupported_attribute(
                f"unknown attribute type {tag!r}", path, attribute
            )

        decoder = self._decoders[attribute_type]
        return decoder(attribute_type, payload, path, active)

    def _decode_null(self, attribute_type: AttributeType, payload: Any,
                     path: Path, active: Set[int]) -> None:
        return None

    def _decode_bool(self, attribute_type: AttributeType, payload: Any,
                     path: Path, active: Set[int]) -> Optional[bool]:
        if not isinstance(payload, bool):
            return self._payload_mismatch(attribute_type, payload, path)
        return payload

    def _decode_number(self, attribute_type: AttributeType, payload: Any,
                       path: Path, active: Set[int]) -> GenericValue:
        if not isinstance(payload, str):
            return self._payload_mismatch(attribute_type, payload, path)

        number = NumberFormat.parse(payload)
        if number is None:
            # Keep unparseable number text as a string rather than dropping it
            self.logger.warning(f"Unparseable number {payload!r} at {format_path(path)} kept as string")
            return payload
        return number

    def _decode_string(self, attribute_type: AttributeType, payload: Any,
                       path: Path, active: Set[int]) -> Optional[str]:
        if not isinstance(payload, str):
            return self._payload_mismatch(attribute_type, payload, path)
        return payload

    def _decode_binary(self, attribute_type: AttributeType, payload: Any,
                       path: Path, active: Set[int]) -> GenericValue:
        raw = self._binary_bytes(payload)
        if raw is None:
            return self._payload_mismatch(attribute_type, payload, path)

        mode = self.config.binary_mode
        if mode == BinaryMode.BYTE_LIST:
            return list(raw)
        if mode == BinaryMode.BASE64:
            return base64.b64encode(raw).decode("ascii")
        return None

    def _decode_list(self, attribute_type: AttributeType, payload: Any,
                     path: Path, active: Set[int]) -> Optional[List[Any]]:
        if not isinstance(payload, (list, tuple)):
            return self._payload_mismatch(attribute_type, payload, path)

        ValidationUtils.enter_container(payload, path, active, self.config.max_depth)
        try:
            return [self._decode(item, path + (index,), active)
                    for index, item in enumerate(payload)]
        finally:
            ValidationUtils.leave_container(payload, active)

    def _decode_map(self, attribute_type: AttributeType, payload: Any,
                    path: Path, active: Set[int]) -> Optional[Dict[str, Any]]:
        if not isinstance(payload, dict):
            return self._payload_mismatch(attribute_type, payload, path)

        ValidationUtils.enter_container(payload, path, active, self.config.max_depth)
        try:
            result = {}
            for key, item in payload.items():
                if not isinstance(key, str):
                    self.error_handler.handle_unsupported_attribute(
                        f"map key {key!r} is not a string, entry dropped", path, payload
                    )
                    continue
                result[key] = self._decode(item, path + (key,), active)
            return result
        finally:
            ValidationUtils.leave_container(payload, active)

    def _decode_set(self, attribute_type: AttributeType, payload: Any,
                    path: Path, active: Set[int]) -> Optional[List[Any]]:
        """Decode SS/NS/BS into a list, discarding set-ness."""
        if not isinstance(payload, (list, tuple, set, frozenset)):
            return self._payload_mismatch(attribute_type, payload, path)

        # SS -> S, NS -> N, BS -> B
        element_tag = attribute_type.value[0]

        ValidationUtils.enter_container(payload, path, active, self.config.max_depth)
        try:
            return [self._decode({element_tag: item}, path + (index,), active)
                    for index, item in enumerate(payload)]
        finally:
            ValidationUtils.leave_container(payload, active)

    def _payload_mismatch(self, attribute_type: AttributeType, payload: Any, path: Path) -> None:
        return self.error_handler.handle_unsupported_attribute(
            f"{attribute_type.value} payload of type {type(payload).__name__} is not supported",
            path,
            {attribute_type.value: payload},
        )

    @staticmethod
    def _binary_bytes(payload: Any) -> Optional[bytes]:
        """Extract raw bytes from a client payload or base64 wire text."""
        if isinstance(payload, Binary):
            return bytes(payload.value)

        if isinstance(payload, (bytes, bytearray)):
            return bytes(payload)

        if isinstance(payload, str):
            try:
                return base64.b64decode(payload, validate=True)
            except (binascii.Error, ValueError):
                return None

        return None
