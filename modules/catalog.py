"""Material catalog keyed by (brand, type, color)."""

from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional

from logging_config import get_logger
from models.material import Material, MaterialKey

logger = get_logger(__name__)


class MaterialCatalog:
    """In-memory catalog of printable materials."""

    def __init__(self) -> None:
        self._materials: Dict[MaterialKey, Material] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._materials)

    def __contains__(self, material: object) -> bool:
        if isinstance(material, Material):
            return material.key in self._materials
        return material in self._materials

    def __iter__(self) -> Iterator[Material]:
        return iter(self.list())

    def add(self, material: Material) -> None:
        """Add or replace the material stored under the same identity key."""
        with self._lock:
            replaced = material.key in self._materials
            self._materials[material.key] = material
        if replaced:
            logger.debug(f"Replaced catalog entry {material.display_name}")

    def get(self, key: MaterialKey) -> Optional[Material]:
        return self._materials.get(key)

    def find_by_name(self, name: str) -> Optional[Material]:
        """First material whose legacy 'Brand Type' name matches."""
        for material in self.list():
            if material.name == name:
                return material
        return None

    def find_by_display_name(self, display_name: str) -> Optional[Material]:
        for material in self.list():
            if material.display_name == display_name:
                return material
        return None

    def remove(self, key: MaterialKey) -> bool:
        with self._lock:
            return self._materials.pop(key, None) is not None

    def list(self) -> List[Material]:
        with self._lock:
            return list(self._materials.values())

    def clear(self) -> None:
        with self._lock:
            self._materials.clear()
