"""Core type definitions for the DynamoDB transcoder."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

from boto3.dynamodb.types import (
    BINARY,
    BINARY_SET,
    BOOLEAN,
    LIST,
    MAP,
    NULL,
    NUMBER,
    NUMBER_SET,
    STRING,
    STRING_SET,
)


T = TypeVar("T")

# Generic (JSON-like) value tree
GenericValue = Union[None, bool, int, Decimal, float, str, List[Any], Dict[str, Any]]

# Low-level client shape: a single-key dict such as {"S": "text"}
AttributeValue = Dict[str, Any]

PathSegment = Union[str, int]
Path = Tuple[PathSegment, ...]


class AttributeType(Enum):
    """Enumeration of DynamoDB attribute value tags."""
    NULL = NULL
    BOOL = BOOLEAN
    N = NUMBER
    S = STRING
    B = BINARY
    L = LIST
    M = MAP
    SS = STRING_SET
    NS = NUMBER_SET
    BS = BINARY_SET

    @classmethod
    def from_tag(cls, tag: Any) -> Optional["AttributeType"]:
        """Look up a tag, returning None for anything outside the grammar."""
        try:
            return cls(tag)
        except ValueError:
            return None

    @property
    def is_set(self) -> bool:
        return self in (AttributeType.SS, AttributeType.NS, AttributeType.BS)


class BinaryMode(Enum):
    """How binary attributes are rendered in the value tree."""
    BYTE_LIST = "byte_list"
    BASE64 = "base64"
    NULL = "null"


class ErrorType(Enum):
    """Enumeration of error types."""
    ENCODE = "encode"
    DECODE = "decode"
    UNSUPPORTED_VALUE = "unsupported_value"
    UNSUPPORTED_ATTRIBUTE = "unsupported_attribute"
    DEPTH = "depth"
    CIRCULAR = "circular"


class DecodeErrorKind(Enum):
    """Reasons a value tree can fail to decode into a typed record."""
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    NUMERIC_OVERFLOW = "numeric_overflow"
    UNKNOWN_VARIANT = "unknown_variant"
    INVALID_VALUE = "invalid_value"


def format_path(path: Path) -> str:
    """Render a path tuple as ``some.deep[0].value``."""
    rendered = ""
    for segment in path:
        if isinstance(segment, int):
            rendered += f"[{segment}]"
        elif rendered:
            rendered += f".{segment}"
        else:
            rendered = str(segment)
    return rendered or "<root>"


@dataclass(frozen=True)
class FieldError:
    """A single structural decoding failure."""
    kind: DecodeErrorKind
    path: Path
    message: str
    input: Any = None

    @property
    def location(self) -> str:
        return format_path(self.path)

    def __str__(self) -> str:
        return f"{self.location}: {self.message} ({self.kind.value})"


class TranscodeError(Exception):
    """Base exception for transcoding errors."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Any] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context


class UnsupportedValueError(TranscodeError, TypeError):
    """A Python object outside the generic value model was given to marshall."""

    def __init__(self, message: str, path: Path = ()):
        super().__init__(message, ErrorType.UNSUPPORTED_VALUE, context={"path": path})
        self.path = path


class UnsupportedAttributeError(TranscodeError, ValueError):
    """An attribute outside the supported grammar (raised in strict mode only)."""

    def __init__(self, message: str, path: Path = (), attribute: Any = None):
        super().__init__(message, ErrorType.UNSUPPORTED_ATTRIBUTE, context={"path": path})
        self.path = path
        self.attribute = attribute


class NestingDepthError(TranscodeError, ValueError):
    """Input nests deeper than the configured maximum."""

    def __init__(self, max_depth: int, path: Path = ()):
        super().__init__(
            f"Nesting depth exceeds maximum of {max_depth} at {format_path(path)}",
            ErrorType.DEPTH,
            context={"path": path, "max_depth": max_depth},
        )
        self.max_depth = max_depth
        self.path = path


class CircularReferenceError(TranscodeError, ValueError):
    """A container was found inside itself."""

    def __init__(self, path: Path = ()):
        super().__init__(
            f"Circular reference detected at {format_path(path)}",
            ErrorType.CIRCULAR,
            context={"path": path},
        )
        self.path = path


class EncodeError(TranscodeError):
    """Structural encoding of a record into the value tree failed."""

    def __init__(self, message: str, path: Path = (), cause: Optional[BaseException] = None):
        super().__init__(message, ErrorType.ENCODE, context={"path": path})
        self.path = path
        self.cause = cause

    @property
    def location(self) -> str:
        return format_path(self.path)


class DecodeError(TranscodeError):
    """Structural decoding of a value tree into a record failed."""

    def __init__(self, errors: List[FieldError], target: Optional[type] = None):
        target_name = getattr(target, "__name__", None) or repr(target)
        summary = "; ".join(str(error) for error in errors) or "unknown error"
        super().__init__(
            f"Failed to decode {target_name}: {summary}",
            ErrorType.DECODE,
            context={"target": target},
        )
        self.errors = errors
        self.target = target

    @property
    def kinds(self) -> List[DecodeErrorKind]:
        return [error.kind for error in self.errors]

    @property
    def paths(self) -> List[Path]:
        return [error.path for error in self.errors]

    def first(self, kind: DecodeErrorKind) -> Optional[FieldError]:
        """Return the first error of the given kind, if any."""
        for error in self.errors:
            if error.kind == kind:
                return error
        return None

    def of_kind(self, kind: DecodeErrorKind) -> List[FieldError]:
        return [error for error in self.errors if error.kind == kind]


# Abstract base classes for interfaces

class ValueTranscoderInterface(ABC):
    """Abstract interface for the value tree <-> attribute tree mapping."""

    @abstractmethod
    def to_attribute(self, value: GenericValue) -> AttributeValue:
        """Convert a generic value into an attribute value."""
        pass

    @abstractmethod
    def to_value(self, attribute: AttributeValue) -> GenericValue:
        """Convert an attribute value into a generic value."""
        pass


class TypedTranscoderInterface(ABC):
    """Abstract interface for record <-> attribute tree mapping."""

    @abstractmethod
    def marshall_t(self, record: Any) -> AttributeValue:
        """Encode a typed record into an attribute value."""
        pass

    @abstractmethod
    def unmarshall_t(self, attribute: AttributeValue, target_type: Type[T]) -> T:
        """Decode an attribute value into an instance of target_type."""
        pass
