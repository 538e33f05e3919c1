"""Structural encode/decode capability for typed records."""

import logging
from abc import ABC, abstractmethod
from collections import deque
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Optional, Set, Type, TypeVar

from pydantic import BeforeValidator, Field, PydanticUserError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, SchemaValidator, core_schema, to_jsonable_python

from .config import TranscoderConfig
from .error_handler import ErrorHandler
from .types import (
    DecodeError,
    DecodeErrorKind,
    EncodeError,
    FieldError,
    GenericValue,
    Path,
    TranscodeError,
    format_path,
)
from .utils.number_format import NumberFormat
from .utils.validation import ValidationUtils


S = TypeVar("S", bound="Structural")
T = TypeVar("T")


def _coerce_byte_list(value: Any) -> Any:
    if isinstance(value, list) and all(isinstance(item, int) for item in value):
        return bytes(value)
    return value


# Fixed-width integer fields; out-of-range values fail as numeric overflows
Int32 = Annotated[int, Field(ge=-(2 ** 31), le=2 ** 31 - 1)]
Int64 = Annotated[int, Field(ge=-(2 ** 63), le=2 ** 63 - 1)]
UInt32 = Annotated[int, Field(ge=0, le=2 ** 32 - 1)]
UInt64 = Annotated[int, Field(ge=0, le=2 ** 64 - 1)]

# Binary field stored as a B attribute; reads back the default byte-list rendering
Bytes = Annotated[bytes, BeforeValidator(_coerce_byte_list)]


class Structural(ABC):
    """
    Capability for types that map themselves to and from the value tree.

    Implement this for records that need hand-written mappings. Any other
    type is handled through pydantic.
    """

    @abstractmethod
    def to_generic_value(self) -> GenericValue:
        """Encode this record as a generic value tree."""
        pass

    @classmethod
    @abstractmethod
    def from_generic_value(cls: Type[S], value: GenericValue) -> S:
        """
        Rebuild a record from a generic value tree.

        Implementations raise DecodeError, or KeyError / TypeError /
        ValueError which are reported as decode failures.
        """
        pass


@lru_cache(maxsize=256)
def _adapter_for(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


# Scalars the value tree carries natively; no cross-type coercion is accepted
_STRICT_SCALARS = {"int", "bool", "str", "bytes"}

# Subtrees copied as is: serializers, metadata, defaults, and dict keys
# (M keys are always text, so numeric and enum keys are parsed from it)
_UNTOUCHED_KEYS = {"metadata", "serialization", "default", "keys_schema"}


def _float_input(value: Any) -> Any:
    if isinstance(value, (int, Decimal)) and not isinstance(value, bool):
        return float(value)
    return value


def _decimal_input(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return Decimal(value)
    return value


_NUMBER_INPUTS = {"float": _float_input, "decimal": _decimal_input}


def _tighten(schema: Any) -> Any:
    """
    Rebuild a core schema with strict scalar validation.

    int, bool, str and bytes schemas become strict. float and decimal
    schemas become strict behind a converter accepting the numbers the
    value tree holds (int and Decimal). Everything else, such as enums,
    dates, UUIDs and sets, keeps pydantic's lax parsing from text and lists.
    """
    if isinstance(schema, list):
        return [_tighten(item) for item in schema]
    if isinstance(schema, tuple):
        return tuple(_tighten(item) for item in schema)
    if not isinstance(schema, dict):
        return schema

    schema_type = schema.get("type")
    if not isinstance(schema_type, str):
        # A mapping of field names, not a schema node
        return {key: _tighten(item) for key, item in schema.items()}

    tightened = {
        key: item if key in _UNTOUCHED_KEYS else _tighten(item)
        for key, item in schema.items()
    }

    if schema_type in _STRICT_SCALARS:
        tightened["strict"] = True
    elif schema_type in _NUMBER_INPUTS and "ref" not in tightened:
        tightened["strict"] = True
        return core_schema.no_info_before_validator_function(_NUMBER_INPUTS[schema_type], tightened)

    return tightened


@lru_cache(maxsize=256)
def _validator_for(target_type: Any) -> SchemaValidator:
    return SchemaValidator(_tighten(_adapter_for(target_type).core_schema))


class StructuralCodec:
    """
    Converts typed records to and from the generic value tree.

    Encoding dumps the record in pydantic's python mode and normalizes the
    output so it contains only None, bool, int, Decimal, float, str,
    bytes, list and dict. Decoding validates the tree with strict scalars:
    text never feeds number or bool fields and numbers never feed bool or
    str fields. Number fields accept int and Decimal, and enums, dates,
    UUIDs, sets and tuples are still parsed from their text and list forms.
    """

    def __init__(self, config: Optional[TranscoderConfig] = None,
                 logger: Optional[logging.Logger] = None,
                 error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the structural codec.

        Args:
            config: Optional TranscoderConfig instance
            logger: Optional logger instance
            error_handler: Optional ErrorHandler instance
        """
        self.config = config or TranscoderConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.config, self.logger)

    def encode(self, record: Any) -> GenericValue:
        """
        Encode a record into the generic value model.

        Args:
            record: Structural instance, pydantic model, dataclass or any
                value pydantic can serialize

        Returns:
            Generic value tree

        Raises:
            EncodeError: If the record cannot be represented
        """
        try:
            if isinstance(record, Structural):
                dumped = record.to_generic_value()
            else:
                dumped = _adapter_for(type(record)).dump_python(record, mode="python", by_alias=True)
        except (EncodeError, DecodeError):
            raise
        except (PydanticSerializationError, PydanticUserError, TypeError, ValueError) as e:
            raise self.error_handler.map_encode_failure(e)

        try:
            return self._normalize(dumped, (), set())
        except EncodeError:
            raise
        except (TranscodeError, PydanticSerializationError, TypeError, ValueError) as e:
            raise self.error_handler.map_encode_failure(e)

    def decode(self, value: GenericValue, target_type: Type[T]) -> T:
        """
        Decode a generic value tree into target_type.

        Args:
            value: Generic value tree
            target_type: Structural subclass or any type pydantic can validate

        Returns:
            A fully populated instance of target_type

        Raises:
            DecodeError: If the tree does not fit target_type
        """
        if isinstance(target_type, type) and issubclass(target_type, Structural):
            return self._decode_structural(value, target_type)

        try:
            return _validator_for(target_type).validate_python(value)
        except ValidationError as e:
            raise self.error_handler.map_validation_error(e, target_type)

    def _decode_structural(self, value: GenericValue, target_type: Type[S]) -> S:
        try:
            return target_type.from_generic_value(value)
        except DecodeError:
            raise
        except ValidationError as e:
            raise self.error_handler.map_validation_error(e, target_type)
        except KeyError as e:
            field_name = e.args[0] if e.args else "<unknown>"
            raise DecodeError([FieldError(
                DecodeErrorKind.MISSING_FIELD, (field_name,), "Field required"
            )], target_type)
        except TypeError as e:
            raise DecodeError([FieldError(DecodeErrorKind.TYPE_MISMATCH, (), str(e))], target_type)
        except ValueError as e:
            raise DecodeError([FieldError(DecodeErrorKind.INVALID_VALUE, (), str(e))], target_type)

    def _normalize(self, value: Any, path: Path, active: Set[int]) -> GenericValue:
        """Reduce pydantic's python-mode output to the generic value model."""
        if value is None or isinstance(value, bool):
            return value

        if isinstance(value, Enum):
            return self._normalize(value.value, path, active)

        if isinstance(value, int):
            return int(value)

        if isinstance(value, (Decimal, float)):
            if not NumberFormat.is_finite(value):
                raise EncodeError(
                    f"Non-finite number {value!r} at {format_path(path)} cannot be stored",
                    path=path,
                )
            return value

        if isinstance(value, str):
            return str(value)

        if isinstance(value, (bytes, bytearray)):
            return bytes(value)

        if isinstance(value, dict):
            ValidationUtils.enter_container(value, path, active, self.config.max_depth)
            try:
                return {self._normalize_key(key, path): self._normalize(item, path + (str(key),), active)
                        for key, item in value.items()}
            finally:
                ValidationUtils.leave_container(value, active)

        if isinstance(value, (list, tuple, set, frozenset, deque)):
            ValidationUtils.enter_container(value, path, active, self.config.max_depth)
            try:
                return [self._normalize(item, path + (index,), active)
                        for index, item in enumerate(value)]
            finally:
                ValidationUtils.leave_container(value, active)

        # datetimes, UUIDs, paths and similar leaves
        try:
            converted = to_jsonable_python(value)
        except PydanticSerializationError as e:
            raise EncodeError(
                f"Value of type {type(value).__name__} at {format_path(path)} is not representable",
                path=path,
                cause=e,
            )
        return self._normalize(converted, path, active)

    @staticmethod
    def _normalize_key(key: Any, path: Path) -> str:
        if isinstance(key, Enum):
            key = key.value
        if isinstance(key, str):
            return str(key)
        if isinstance(key, (int, Decimal, float)) and not isinstance(key, bool):
            return NumberFormat.to_text(key) or str(key)
        raise EncodeError(
            f"Map key {key!r} at {format_path(path)} cannot be used as an attribute name",
            path=path,
        )
