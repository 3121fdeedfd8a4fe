import importlib.metadata

from .errors import (
    EmptySelection,
    FeatherError,
    IOFailure,
    OutOfRangeSelector,
    RequestError,
    UnitPreconditionViolation,
    UnsupportedUnitError,
)
from .units import UnitSystem, convert

NAME = "feather"

try:
    __version__ = importlib.metadata.version(NAME)
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"
