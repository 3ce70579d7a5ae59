"""Extension-based classification."""

from .engine import Classifier, screenshot_month_label
from .models import Category, Destination
from .rules import DEFAULT_CATEGORY, build_extension_table, looks_like_screenshot, tag_for

__all__ = [
    "Classifier",
    "Category",
    "Destination",
    "DEFAULT_CATEGORY",
    "build_extension_table",
    "looks_like_screenshot",
    "screenshot_month_label",
    "tag_for",
]
