"""Catalog repository.

Owns the lifecycle of the current catalog snapshot: load from a file or
payload, replace, reset. Engine calls take the snapshot returned by
``current`` and never see later replacements.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Union

from tuitioncalc.catalog.loader import parse_catalog
from tuitioncalc.domain.models import CourseCatalog
from tuitioncalc.domain.policies import ScheduleConfig
from tuitioncalc.errors import CatalogError

log = logging.getLogger(__name__)


class CatalogRepository:
    """Holds the active course catalog.

    Example:
        >>> repo = CatalogRepository()
        >>> repo.load_file("catalog.json")
        >>> catalog = repo.current
        >>> result = calculate_total_fee(catalog, "sat_1500", 0.1, inputs)
    """

    def __init__(self, config: Optional[ScheduleConfig] = None):
        self.config = config or ScheduleConfig()
        self._catalog = CourseCatalog()

    @property
    def current(self) -> CourseCatalog:
        return self._catalog

    @property
    def is_loaded(self) -> bool:
        return bool(self._catalog.courses)

    def load_payload(self, payload: Mapping, name: Optional[str] = None) -> CourseCatalog:
        """Parse a payload and make it the current catalog."""
        catalog = parse_catalog(payload, name=name, config=self.config)
        return self.replace(catalog)

    def load_file(self, path: Union[str, Path], name: Optional[str] = None) -> CourseCatalog:
        """Load a JSON catalog file and make it the current catalog.

        Raises:
            CatalogError: If the file cannot be read or is not valid JSON.
        """
        catalog_path = Path(path)
        try:
            payload = json.loads(catalog_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CatalogError(f"Cannot read catalog {catalog_path}: {exc}") from exc
        return self.load_payload(payload, name=name)

    def replace(self, catalog: CourseCatalog) -> CourseCatalog:
        self._catalog = catalog
        log.info(
            "Catalog %r loaded: %d courses in %d categories",
            catalog.name,
            len(catalog.courses),
            len(catalog.categories),
        )
        return catalog

    def reset(self) -> None:
        self._catalog = CourseCatalog()
        log.info("Catalog reset")
