"""Length unit systems and conversion between them."""

from enum import Enum
from typing import Union

from .errors import UnsupportedUnitError


class UnitSystem(str, Enum):
    """Length units, valued by the names the host document prints."""

    NONE = "None"
    MICRONS = "Microns"
    MILLIMETERS = "Millimeters"
    CENTIMETERS = "Centimeters"
    METERS = "Meters"
    KILOMETERS = "Kilometers"
    INCHES = "Inches"
    FEET = "Feet"
    YARDS = "Yards"
    MILES = "Miles"
    UNSET = "Unset"

    @classmethod
    def parse(cls, value: Union[str, "UnitSystem"]) -> "UnitSystem":
        """Look up a unit by value, member name or abbreviation."""
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedUnitError(f"Unknown unit system {value!r}") from None

    @classmethod
    def _missing_(cls, value):
        # lets pydantic and UnitSystem("mm") accept abbreviations
        if isinstance(value, str):
            key = value.strip().lower()
            for unit in cls:
                if key in (unit.value.lower(), unit.name.lower()):
                    return unit
            return _ABBREVIATIONS.get(key)
        return None


_ABBREVIATIONS = {
    "um": UnitSystem.MICRONS,
    "mm": UnitSystem.MILLIMETERS,
    "cm": UnitSystem.CENTIMETERS,
    "m": UnitSystem.METERS,
    "km": UnitSystem.KILOMETERS,
    "in": UnitSystem.INCHES,
    "ft": UnitSystem.FEET,
    "yd": UnitSystem.YARDS,
    "mi": UnitSystem.MILES,
}

# meters per unit
METERS_PER_UNIT = {
    UnitSystem.MICRONS: 1.0e-6,
    UnitSystem.MILLIMETERS: 1.0e-3,
    UnitSystem.CENTIMETERS: 1.0e-2,
    UnitSystem.METERS: 1.0,
    UnitSystem.KILOMETERS: 1.0e3,
    UnitSystem.INCHES: 0.0254,
    UnitSystem.FEET: 0.3048,
    UnitSystem.YARDS: 0.9144,
    UnitSystem.MILES: 1609.344,
}

SUPPORTED_UNITS = tuple(METERS_PER_UNIT)


def scale_factor(from_unit, to_unit) -> float:
    """Factor that takes a length in ``from_unit`` to ``to_unit``."""
    src = UnitSystem.parse(from_unit)
    dst = UnitSystem.parse(to_unit)
    for unit in (src, dst):
        if unit not in METERS_PER_UNIT:
            raise UnsupportedUnitError(f"Unit system {unit.value} cannot be converted")
    if src is dst:
        return 1.0
    return METERS_PER_UNIT[src] / METERS_PER_UNIT[dst]


def convert(value: float, from_unit, to_unit) -> float:
    """Convert a length-based quantity between unit systems.

    Only the length dimension is scaled, so an acceleration given in
    meters/second² comes out in ``to_unit``/second².
    """
    factor = scale_factor(from_unit, to_unit)
    if factor == 1.0:
        return float(value)
    return float(value) * factor
