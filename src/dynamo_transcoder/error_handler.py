"""Error handling implementation for the DynamoDB transcoder."""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from boto3.dynamodb.types import NULL
from pydantic import ValidationError

from .config import TranscoderConfig
from .types import (
    AttributeValue,
    DecodeError,
    DecodeErrorKind,
    EncodeError,
    FieldError,
    Path,
    UnsupportedAttributeError,
    UnsupportedValueError,
    format_path,
)


_MISSING_TYPES = {
    "missing",
    "missing_argument",
    "missing_keyword_only_argument",
    "missing_positional_only_argument",
}

_VARIANT_TYPES = {
    "enum",
    "literal_error",
    "union_tag_invalid",
    "union_tag_not_found",
}

_BOUND_TYPES = {
    "greater_than",
    "greater_than_equal",
    "less_than",
    "less_than_equal",
}

_OVERFLOW_TYPES = {
    "finite_number",
    "int_parsing_size",
    "decimal_max_digits",
    "decimal_whole_digits",
}


class ErrorHandler:
    """
    Error handler for transcoder operations.

    Applies the degrade-or-raise policy for input outside the supported
    grammar and translates pydantic failures into the transcoder's own
    error types.
    """

    def __init__(self, config: Optional[TranscoderConfig] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            config: Optional TranscoderConfig; strict mode raises instead of degrading
            logger: Optional logger instance for error reporting
        """
        self.config = config or TranscoderConfig()
        self.logger = logger or logging.getLogger(__name__)

    def handle_unsupported_attribute(self, message: str, path: Path, attribute: Any) -> None:
        """
        Handle an attribute outside the supported grammar.

        Args:
            message: Description of the problem
            path: Location of the attribute in the tree
            attribute: The offending attribute

        Returns:
            None, the value the attribute degrades to

        Raises:
            UnsupportedAttributeError: In strict mode
        """
        if self.config.strict:
            raise UnsupportedAttributeError(f"{message} at {format_path(path)}", path, attribute)

        self.logger.warning(f"Unsupported attribute at {format_path(path)} degraded to null: {message}")
        return None

    def handle_unsupported_value(self, message: str, path: Path) -> AttributeValue:
        """
        Handle a generic value that has no attribute representation.

        Args:
            message: Description of the problem
            path: Location of the value in the tree

        Returns:
            A NULL attribute

        Raises:
            UnsupportedValueError: In strict mode
        """
        if self.config.strict:
            raise UnsupportedValueError(f"{message} at {format_path(path)}", path)

        self.logger.warning(f"Value at {format_path(path)} degraded to null: {message}")
        return {NULL: True}

    def map_validation_error(self, error: ValidationError, target: Any) -> DecodeError:
        """
        Translate a pydantic ValidationError into a DecodeError.

        Args:
            error: ValidationError raised while validating a value tree
            target: The type that was being decoded

        Returns:
            DecodeError with one FieldError per reported problem
        """
        field_errors: List[FieldError] = []

        for details in error.errors():
            kind = self.classify(details)
            field_errors.append(FieldError(
                kind=kind,
                path=tuple(details.get("loc", ())),
                message=details.get("msg", "invalid value"),
                input=None if kind == DecodeErrorKind.MISSING_FIELD else details.get("input"),
            ))

        self.logger.debug(f"Decoding {getattr(target, '__name__', target)} failed with "
                          f"{len(field_errors)} field errors")
        return DecodeError(field_errors, target)

    def map_encode_failure(self, error: BaseException, path: Path = ()) -> EncodeError:
        """
        Wrap a failure raised while encoding a record.

        Args:
            error: The underlying exception
            path: Location of the failing field when known

        Returns:
            EncodeError carrying the cause
        """
        path = getattr(error, "path", None) or path
        message = f"Failed to encode value at {format_path(path)}: {error}"
        self.logger.debug(message)
        return EncodeError(message, path=path, cause=error)

    @staticmethod
    def classify(details: Dict[str, Any]) -> DecodeErrorKind:
        """
        Classify a single pydantic error entry.

        Args:
            details: One entry of ValidationError.errors()

        Returns:
            DecodeErrorKind describing the failure
        """
        error_type = details.get("type", "")

        if error_type in _MISSING_TYPES:
            return DecodeErrorKind.MISSING_FIELD

        if error_type in _VARIANT_TYPES:
            return DecodeErrorKind.UNKNOWN_VARIANT

        if error_type in _OVERFLOW_TYPES:
            return DecodeErrorKind.NUMERIC_OVERFLOW

        if error_type in _BOUND_TYPES:
            value = details.get("input")
            if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
                return DecodeErrorKind.NUMERIC_OVERFLOW
            return DecodeErrorKind.INVALID_VALUE

        if (error_type.endswith("_type") or error_type.endswith("_parsing")
                or error_type in ("int_from_float", "none_required", "is_instance_of")):
            return DecodeErrorKind.TYPE_MISMATCH

        return DecodeErrorKind.INVALID_VALUE
