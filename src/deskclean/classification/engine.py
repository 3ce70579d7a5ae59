"""Extension-based classifier that picks a destination for each entry.

Routing never inspects file contents: the extension selects a category from a
static table, and a small set of naming patterns diverts screenshots into a
monthly folder when the user has asked for one.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

from deskclean.config.models import DeskCleanConfig
from deskclean.errors import ClassificationError
from deskclean.ingestion.models import FileEntry

from .models import Category, Destination
from .rules import (
    CATEGORY_DIRECTORIES,
    DEFAULT_CATEGORY,
    build_extension_table,
    looks_like_screenshot,
)

LOGGER = logging.getLogger(__name__)


def screenshot_month_label(now: datetime) -> str:
    """Return the monthly bucket name, e.g. ``2024-01 January``."""
    return now.strftime("%Y-%m %B")


class Classifier:
    """Map file entries to destination directories under the home folder."""

    def __init__(self, home: Optional[Path] = None) -> None:
        self._home = home

    @property
    def home(self) -> Path:
        """Return the home directory destinations are resolved against.

        Raises:
            ClassificationError: If no home directory can be determined.
        """
        if self._home is None:
            try:
                self._home = Path.home()
            except (RuntimeError, KeyError) as exc:
                raise ClassificationError(f"Unable to resolve home directory: {exc}") from exc
        return self._home

    def category_for(
        self,
        entry: FileEntry,
        config: DeskCleanConfig,
        extensions: Optional[Mapping[str, Category]] = None,
    ) -> Category:
        """Return the category for ``entry`` without resolving any paths.

        ``extensions`` is a table from :func:`build_extension_table`; callers
        classifying many entries build it once and pass it in.
        """
        if config.preferences.create_screenshots_folder and looks_like_screenshot(entry.name):
            return Category.SCREENSHOTS
        if extensions is None:
            extensions = build_extension_table(config.organization.extension_overrides)
        return extensions.get(entry.extension.lower(), DEFAULT_CATEGORY)

    def destination_for(
        self,
        entry: FileEntry,
        config: DeskCleanConfig,
        now: Optional[datetime] = None,
        *,
        extensions: Optional[Mapping[str, Category]] = None,
    ) -> Destination:
        """Return the directory ``entry`` should be moved into.

        Args:
            entry: File discovered in the source directory.
            config: Configuration snapshot for this pass.
            now: Reference time for the screenshot month; defaults to the local clock.
            extensions: Prebuilt extension table shared across a pass.

        Returns:
            Destination: Target directory and its category.

        Raises:
            ClassificationError: If the home directory cannot be resolved.
        """
        category = self.category_for(entry, config, extensions)
        directory = self.home / CATEGORY_DIRECTORIES[category]
        if category is Category.SCREENSHOTS:
            reference = now.astimezone() if now is not None else datetime.now().astimezone()
            directory = directory / screenshot_month_label(reference)

        LOGGER.debug("Classified %s as %s -> %s", entry.name, category.value, directory)
        return Destination(directory=directory, category=category)
