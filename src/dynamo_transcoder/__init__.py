"""
DynamoDB Transcoder - Convert JSON-like values and typed records to DynamoDB attributes.

Maps generic value trees (None, bool, numbers, str, list, dict) onto the
DynamoDB attribute-value model and back, and marshals typed records
through pydantic.
"""

from .config import TranscoderConfig
from .structural import Bytes, Int32, Int64, Structural, StructuralCodec, UInt32, UInt64
from .transcoder import (
    DynamoTranscoder,
    default_transcoder,
    marshall,
    marshall_item,
    marshall_t,
    unmarshall,
    unmarshall_item,
    unmarshall_t,
)
from .typed_transcoder import TypedTranscoder
from .types import (
    AttributeType,
    BinaryMode,
    CircularReferenceError,
    DecodeError,
    DecodeErrorKind,
    EncodeError,
    FieldError,
    NestingDepthError,
    TranscodeError,
    UnsupportedAttributeError,
    UnsupportedValueError,
)
from .value_transcoder import ValueTranscoder

__version__ = "1.0.0"
__all__ = [
    "DynamoTranscoder",
    "ValueTranscoder",
    "TypedTranscoder",
    "StructuralCodec",
    "Structural",
    "TranscoderConfig",
    "marshall",
    "unmarshall",
    "marshall_t",
    "unmarshall_t",
    "marshall_item",
    "unmarshall_item",
    "default_transcoder",
    "AttributeType",
    "BinaryMode",
    "DecodeErrorKind",
    "FieldError",
    "TranscodeError",
    "EncodeError",
    "DecodeError",
    "UnsupportedValueError",
    "UnsupportedAttributeError",
    "NestingDepthError",
    "CircularReferenceError",
    "Int32",
    "Int64",
    "UInt32",
    "UInt64",
    "Bytes",
]
