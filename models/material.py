"""
Material catalog entries.

A material is addressed by its (brand, type, color) identity key. The
catalog owns Material objects; inventory and orders refer to them by key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, NamedTuple


class MaterialKey(NamedTuple):
    """Identity of a material across catalog, inventory and orders."""

    brand: str
    type: str
    color: str

    @property
    def display_name(self) -> str:
        return f"{self.type} - {self.brand} ({self.color})"


@dataclass
class Material:
    """
    A printable material (filament or resin).

    Fields are mutable for editing in place, but the identity key is derived
    on every access, so changing brand, type or color effectively makes it a
    different material for inventory purposes.
    """

    brand: str
    """Manufacturer (e.g., 'Overture')."""

    type: str
    """Material family (e.g., 'PLA', 'PETG', 'ABS')."""

    cost_per_gram: float
    """Cost per gram in the configured currency."""

    print_temp: int
    """Recommended nozzle temperature in Celsius."""

    color: str
    """Color name."""

    @property
    def key(self) -> MaterialKey:
        return MaterialKey(self.brand, self.type, self.color)

    @property
    def display_name(self) -> str:
        """Display name in the form 'Type - Brand (Color)'."""
        return self.key.display_name

    @property
    def name(self) -> str:
        """Legacy name 'Brand Type' used by the pipe-delimited files."""
        return f"{self.brand} {self.type}"

    def material_info(self) -> str:
        return (
            f"Brand: {self.brand}\n"
            f"Type: {self.type}\n"
            f"Cost per gram: ${self.cost_per_gram:.2f}\n"
            f"Print temperature: {self.print_temp}°C\n"
            f"Color: {self.color}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brand": self.brand,
            "type": self.type,
            "cost_per_gram": self.cost_per_gram,
            "print_temp": self.print_temp,
            "color": self.color,
            "display_name": self.display_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Material":
        return cls(
            brand=str(data.get("brand", "")).strip(),
            type=str(data.get("type", "")).strip(),
            cost_per_gram=float(data.get("cost_per_gram", 0.0)),
            print_temp=int(data.get("print_temp", 0)),
            color=str(data.get("color", "")).strip(),
        )
