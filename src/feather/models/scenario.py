from enum import Enum


class Scenario(str, Enum):
    """Analysis commands; the value is the worker's mode keyword."""

    LIGHTEN = "lighten"
    PRINTABLE = "printable"
    HOLLOW = "hollow"


class Category(str, Enum):
    """Kinds of selector a user answers."""

    MATERIAL = "material"
    USE_CASE = "use_case"
    PRECISION = "precision"
