"""Exceptions raised by the label overlay engine."""

from __future__ import annotations


class CompositeError(Exception):
    """Base class for errors reported before any frame is produced."""


class DimensionMismatch(CompositeError):
    """The two input images differ in width or height."""

    def __init__(
        self,
        first_size: tuple[int, int],
        second_size: tuple[int, int],
    ) -> None:
        self.first_size = first_size
        self.second_size = second_size
        super().__init__(
            "Images must be the same size. "
            f"Got {first_size[0]}x{first_size[1]} and "
            f"{second_size[0]}x{second_size[1]}"
        )


class InvalidLabelConfig(CompositeError):
    """A label field failed validation."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Invalid label {field}: {message}")


class UnknownFontFace(InvalidLabelConfig):
    def __init__(self, face: str, available: str) -> None:
        self.face = face
        super().__init__(
            "fontFace",
            f"unknown font face '{face}'. Available: {available}",
        )


class InvalidTiming(CompositeError):
    """Frame delay or loop count is out of range."""


__all__ = [
    "CompositeError",
    "DimensionMismatch",
    "InvalidLabelConfig",
    "InvalidTiming",
    "UnknownFontFace",
]
