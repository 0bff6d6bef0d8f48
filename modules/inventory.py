"""
Material inventory ledger (grams on hand per material).

Stock policy for materials that were never stocked:
    default_stock=1000  -> report 1000g (the shop's historical behaviour)
    default_stock=None  -> report 0g (unknown material is out of stock)

Thread Safety:
    The check-then-decrement in consume() runs under a lock, so two
    concurrent orders cannot both pass the sufficiency check on the same
    grams.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional, Union

from logging_config import get_logger
from models.material import Material, MaterialKey

logger = get_logger(__name__)

DEFAULT_STOCK_GRAMS = 1000

MaterialRef = Union[Material, MaterialKey]


def _key(material: Optional[MaterialRef]) -> Optional[MaterialKey]:
    if material is None:
        return None
    if isinstance(material, Material):
        return material.key
    return material


class InventoryLedger:
    """Grams available for each material identity key."""

    def __init__(self, default_stock: Optional[int] = DEFAULT_STOCK_GRAMS) -> None:
        self._stock: Dict[MaterialKey, int] = {}
        self._default_stock = default_stock
        self._lock = threading.Lock()

    @property
    def default_stock(self) -> Optional[int]:
        return self._default_stock

    def is_recorded(self, material: MaterialRef) -> bool:
        return _key(material) in self._stock

    def get_stock(self, material: Optional[MaterialRef]) -> int:
        key = _key(material)
        if key is None:
            return 0
        with self._lock:
            return self._get_unlocked(key)

    def has_sufficient(self, material: Optional[MaterialRef], grams: int) -> bool:
        return self.get_stock(material) >= grams

    def set_stock(self, material: Optional[MaterialRef], grams: int) -> bool:
        """Record an absolute stock level. Negative levels are ignored."""
        key = _key(material)
        if key is None or grams < 0:
            return False
        with self._lock:
            self._stock[key] = int(grams)
        logger.debug(f"Stock for {key.display_name} set to {grams}g")
        return True

    def replenish(self, material: Optional[MaterialRef], grams: int) -> bool:
        """Add grams to the current level (including the default for unstocked materials)."""
        key = _key(material)
        if key is None or grams <= 0:
            return False
        with self._lock:
            self._stock[key] = self._get_unlocked(key) + int(grams)
        logger.info(f"Replenished {key.display_name} by {grams}g")
        return True

    def consume(self, material: Optional[MaterialRef], grams: int) -> bool:
        """
        Remove grams from stock if enough is available.

        Returns:
            True if stock was decremented; False (with stock unchanged) when
            the material is missing, grams is not positive, or stock is short
        """
        key = _key(material)
        if key is None or grams <= 0:
            return False
        with self._lock:
            current = self._get_unlocked(key)
            if current < grams:
                logger.info(
                    f"Cannot consume {grams}g of {key.display_name}: only {current}g available"
                )
                return False
            self._stock[key] = current - grams
        return True

    def items(self) -> Dict[MaterialKey, int]:
        """Explicitly recorded stock levels (defaults are not included)."""
        with self._lock:
            return dict(self._stock)

    def clear(self) -> None:
        with self._lock:
            self._stock.clear()

    def _get_unlocked(self, key: MaterialKey) -> int:
        grams = self._stock.get(key)
        if grams is not None:
            return grams
        return self._default_stock if self._default_stock is not None else 0
