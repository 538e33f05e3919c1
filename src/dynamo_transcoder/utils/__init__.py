"""Utility functions for the DynamoDB transcoder."""

from .number_format import NumberFormat
from .size_calculator import AttributeSizeCalculator, MAX_ITEM_SIZE
from .validation import ValidationUtils

__all__ = ["NumberFormat", "AttributeSizeCalculator", "MAX_ITEM_SIZE", "ValidationUtils"]
