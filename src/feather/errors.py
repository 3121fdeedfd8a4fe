"""Exceptions raised by the job pipeline."""


class FeatherError(Exception):
    """Base class for all job pipeline failures."""


class OutOfRangeSelector(FeatherError, ValueError):
    """A selector is outside the closed range of its table."""

    def __init__(self, category, selector, valid=None, labels=""):
        self.category = category
        self.selector = selector
        self.valid = valid
        msg = f"{category} selector {selector!r} is out of range"
        if valid is not None:
            msg += f" ({valid[0]}..{valid[-1]})"
        if labels:
            msg += f": {labels}"
        super().__init__(msg)


class EmptySelection(FeatherError):
    """No sample points were picked."""


class UnitPreconditionViolation(FeatherError):
    """Geometry was not saved in the unit the physical constants assume."""


class UnsupportedUnitError(FeatherError, ValueError):
    """A unit system outside the supported length units."""


class IOFailure(FeatherError, OSError):
    """Writing an artifact or starting the worker failed."""


class RequestError(FeatherError, ValueError):
    """A job request file could not be parsed."""
