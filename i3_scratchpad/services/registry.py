"""Sticky pattern registry.

Stored at ~/.config/i3-scratchpad/sticky.json as:

    {
      "sticky_patterns": ["^Spotify$", "pavucontrol"]
    }

Patterns are kept in insertion order without duplicates. Every mutation is
written back to disk immediately.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..config import default_config_dir
from ..constants import STICKY_REGISTRY_FILENAME
from ..errors import InvalidPatternError, RegistryError


class StickyRegistryData(BaseModel):
    """On-disk registry schema."""

    sticky_patterns: List[str] = Field(default_factory=list, description="Regexes of sticky windows")

    @field_validator("sticky_patterns")
    @classmethod
    def dedupe(cls, v: List[str]) -> List[str]:
        """Drop duplicates, keeping the first occurrence."""
        return list(dict.fromkeys(v))


class StickyRegistry:
    """File-backed set of sticky window patterns."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize registry.

        Args:
            path: Registry file (default: ~/.config/i3-scratchpad/sticky.json)
        """
        self.path = Path(path) if path else default_config_dir() / STICKY_REGISTRY_FILENAME
        self._patterns: List[str] = []

    @classmethod
    def open(cls, path: Optional[Path] = None) -> "StickyRegistry":
        registry = cls(path)
        registry.load()
        return registry

    def load(self) -> None:
        """Load patterns from disk; a missing file is an empty registry.

        Raises:
            RegistryError: If the file is unreadable or malformed
        """
        if not self.path.exists():
            self._patterns = []
            return

        try:
            with self.path.open("r") as f:
                data = StickyRegistryData.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError, OSError) as e:
            raise RegistryError(f"Failed to load sticky registry {self.path}: {e}", str(self.path)) from e

        self._patterns = data.sticky_patterns

    def save(self) -> None:
        """Write the registry, creating its directory if needed.

        Performs atomic write using temp file + rename.

        Raises:
            RegistryError: If the file cannot be written
        """
        data = StickyRegistryData(sticky_patterns=self._patterns)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=".sticky-",
                suffix=".json",
            )
        except OSError as e:
            raise RegistryError(f"Failed to save sticky registry {self.path}: {e}", str(self.path)) from e

        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data.model_dump(), f, indent=2)
                f.write("\n")
            os.rename(temp_path, self.path)
        except OSError as e:
            if Path(temp_path).exists():
                os.unlink(temp_path)
            raise RegistryError(f"Failed to save sticky registry {self.path}: {e}", str(self.path)) from e

    def add(self, pattern: str) -> bool:
        """Register a pattern and save.

        Returns:
            False if the pattern was already registered

        Raises:
            InvalidPatternError: If the pattern is not a valid regex
            RegistryError: If saving fails
        """
        try:
            re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e

        if pattern in self._patterns:
            return False
        self._patterns.append(pattern)
        self.save()
        return True

    def remove(self, pattern: str) -> None:
        """Unregister a pattern and save.

        Raises:
            RegistryError: If the pattern is not registered or saving fails
        """
        if pattern not in self._patterns:
            raise RegistryError(f"pattern '{pattern}' is not registered", str(self.path))
        self._patterns.remove(pattern)
        self.save()

    def has(self, pattern: str) -> bool:
        return pattern in self._patterns

    @property
    def patterns(self) -> List[str]:
        return list(self._patterns)

    def is_empty(self) -> bool:
        return not self._patterns

    def __len__(self) -> int:
        return len(self._patterns)
