"""Typed transcoder between records and DynamoDB attribute trees."""

import logging
from typing import Any, Optional, Type, TypeVar

from .config import TranscoderConfig
from .error_handler import ErrorHandler
from .structural import StructuralCodec
from .types import (
    AttributeValue,
    DecodeError,
    DecodeErrorKind,
    FieldError,
    TranscodeError,
    TypedTranscoderInterface,
)
from .value_transcoder import ValueTranscoder


T = TypeVar("T")


class TypedTranscoder(TypedTranscoderInterface):
    """
    Marshals typed records through the generic value tree.

    A record is first encoded by the structural codec, then handed to the
    value transcoder; decoding runs the same steps in reverse. Either the
    whole result is produced or an EncodeError / DecodeError is raised.
    """

    def __init__(self, value_transcoder: Optional[ValueTranscoder] = None,
                 codec: Optional[StructuralCodec] = None,
                 config: Optional[TranscoderConfig] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the typed transcoder.

        Args:
            value_transcoder: Optional ValueTranscoder instance
            codec: Optional StructuralCodec instance
            config: Optional TranscoderConfig instance
            logger: Optional logger instance
        """
        self.config = config or TranscoderConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = ErrorHandler(self.config, self.logger)
        self.value_transcoder = value_transcoder or ValueTranscoder(
            self.config, self.logger, self.error_handler
        )
        self.codec = codec or StructuralCodec(self.config, self.logger, self.error_handler)

    def marshall_t(self, record: Any) -> AttributeValue:
        """
        Encode a typed record into an attribute value.

        Args:
            record: Structural instance, pydantic model, dataclass or other
                value pydantic can serialize

        Returns:
            Attribute value (an M attribute for record types)

        Raises:
            EncodeError: If the record cannot be encoded
        """
        value = self.codec.encode(record)

        try:
            return self.value_transcoder.to_attribute(value)
        except TranscodeError as e:
            raise self.error_handler.map_encode_failure(e)

    def unmarshall_t(self, attribute: AttributeValue, target_type: Type[T]) -> T:
        """
        Decode an attribute value into an instance of target_type.

        Args:
            attribute: Attribute value in the low-level client shape
            target_type: Structural subclass or any type pydantic can validate

        Returns:
            A fully populated instance of target_type

        Raises:
            DecodeError: If the attribute does not fit target_type
        """
        try:
            value = self.value_transcoder.to_value(attribute)
        except TranscodeError as e:
            path = getattr(e, "path", ())
            raise DecodeError([FieldError(DecodeErrorKind.INVALID_VALUE, path, str(e))], target_type)

        return self.codec.decode(value, target_type)
