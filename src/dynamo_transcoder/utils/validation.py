"""Validation utilities for traversing value and attribute trees."""

from typing import Any, Dict, Set

from ..types import CircularReferenceError, NestingDepthError, Path, UnsupportedValueError, format_path


class ValidationUtils:
    """Utility class for guarding recursive traversals."""

    @staticmethod
    def enter_container(container: Any, path: Path, active: Set[int], max_depth: int) -> None:
        """
        Register a container on the current traversal path.

        Args:
            container: List or dict about to be traversed
            path: Location of the container in the tree
            active: Ids of the containers currently being traversed
            max_depth: Deepest nesting level allowed

        Raises:
            NestingDepthError: If the container sits deeper than max_depth
            CircularReferenceError: If the container is already being traversed
        """
        if len(path) >= max_depth:
            raise NestingDepthError(max_depth, path)

        container_id = id(container)
        if container_id in active:
            raise CircularReferenceError(path)
        active.add(container_id)

    @staticmethod
    def leave_container(container: Any, active: Set[int]) -> None:
        """Remove a container from the current traversal path."""
        active.discard(id(container))

    @staticmethod
    def validate_item_keys(item: Dict[Any, Any], path: Path = ()) -> None:
        """
        Ensure every key of a mapping is text.

        Raises:
            UnsupportedValueError: If a key is not a str
        """
        for key in item:
            if not isinstance(key, str):
                raise UnsupportedValueError(
                    f"Map keys must be str, got {type(key).__name__} key {key!r} at {format_path(path)}",
                    path,
                )

