from enum import Enum


class VariationType(str, Enum):
    """Axes a listing may vary along."""

    COLOR = "Color"
    SIZE = "Size"
    EDITION = "Edition"
