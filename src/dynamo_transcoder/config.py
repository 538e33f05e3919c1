"""Configuration for the transcoders."""

from dataclasses import dataclass, replace
from typing import Any

from .types import BinaryMode


DEFAULT_MAX_DEPTH = 256

# Each nesting level costs a couple of interpreter frames.
MAX_ALLOWED_DEPTH = 900


@dataclass(frozen=True)
class TranscoderConfig:
    """
    Settings shared by the value and typed transcoders.

    Attributes:
        max_depth: Deepest container nesting accepted in either direction
        strict: Raise UnsupportedAttributeError / UnsupportedValueError
            instead of degrading anomalous input to null
        binary_mode: Rendering of binary attributes in the value tree
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    strict: bool = False
    binary_mode: BinaryMode = BinaryMode.BYTE_LIST

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ValueError("max_depth must be an integer")

        if not 1 <= self.max_depth <= MAX_ALLOWED_DEPTH:
            raise ValueError(f"max_depth must be between 1 and {MAX_ALLOWED_DEPTH}")

        if not isinstance(self.binary_mode, BinaryMode):
            # Accept the plain string form, e.g. "base64"
            try:
                object.__setattr__(self, "binary_mode", BinaryMode(self.binary_mode))
            except ValueError:
                raise ValueError(f"Invalid binary_mode: {self.binary_mode!r}")

    def with_overrides(self, **changes: Any) -> "TranscoderConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
