"""Search specs reader — Loads YAML search specs with per-process caching."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from libdiscover.search.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

BUNDLED_SPECS_DIR = Path(__file__).resolve().parent.parent / "specs"


class SearchSpecsReader:
    """Locate and parse search spec files.

    Directories are searched in order, so local overrides listed first shadow
    the bundled specs. A spec file that cannot be found yields an empty
    mapping, which makes every handler fall back to plain field searches.

    Args:
        search_dirs: Extra directories to search before the bundled specs.
    """

    def __init__(self, search_dirs: list[str | Path] | None = None) -> None:
        self._dirs = [Path(d) for d in (search_dirs or [])] + [BUNDLED_SPECS_DIR]
        self._cache: dict[str, dict[str, Any]] = {}

    def get(self, filename: str) -> dict[str, Any]:
        """Return the parsed specs stored in ``filename``.

        Raises:
            ConfigurationError: If the file exists but is not a YAML mapping.
        """
        if filename in self._cache:
            return self._cache[filename]

        path = self._locate(filename)
        if path is None:
            logger.warning("Search specs '%s' not found in %s", filename, [str(d) for d in self._dirs])
            specs: dict[str, Any] = {}
        else:
            with open(path, encoding="utf-8") as f:
                try:
                    loaded = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Invalid search specs in {path}: {e}") from e
            if loaded is None:
                loaded = {}
            if not isinstance(loaded, dict):
                raise ConfigurationError(f"Search specs in {path} must be a mapping, got {type(loaded).__name__}")
            specs = loaded
            logger.debug("Loaded %d search specs from %s", len(specs), path)

        self._cache[filename] = specs
        return specs

    def _locate(self, filename: str) -> Path | None:
        for directory in self._dirs:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
        return None
