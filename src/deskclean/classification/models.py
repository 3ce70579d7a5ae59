"""Classification data models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class Category(str, Enum):
    """Logical destination groups for organized files."""

    PICTURES = "Pictures"
    DOCUMENTS = "Documents"
    MUSIC = "Music"
    MOVIES = "Movies"
    DEVELOPER = "Developer"
    ARCHIVE = "Archive"
    SCREENSHOTS = "Screenshots"


class Destination(BaseModel):
    """Directory a file should be moved into.

    Attributes:
        directory: Absolute destination directory.
        category: Category that selected the directory.
    """

    model_config = ConfigDict(frozen=True)

    directory: Path
    category: Category
