"""Qt-free helpers for the editor window."""

from ..models import SliceSet


def fit_within(
    size: "tuple[int, int]", bounds: "tuple[int, int]"
) -> "tuple[int, int]":
    """Largest size with the same aspect ratio that fits inside bounds.

    Never upscales and never returns a dimension below 1.
    """
    width, height = size
    max_width, max_height = bounds
    ratio = min(max_width / width, max_height / height, 1.0)
    return (max(1, int(width * ratio)), max(1, int(height * ratio)))


def describe_slices(slices: SliceSet) -> str:
    """One-line summary of a slice set for the status bar."""
    widths = slices.widths
    if len(set(widths)) == 1:
        return f"{len(slices)} slices of {widths[0]}x{slices.height}"
    return (
        f"{len(slices)} slices, {slices.height}px tall, "
        f"widths {min(widths)}-{max(widths)}px"
    )
