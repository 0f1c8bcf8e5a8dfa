from __future__ import annotations


class UnknownReferenceError(KeyError):
    """A city id, age-group key or program id that the reference data does not define."""


__all__ = ["UnknownReferenceError"]
