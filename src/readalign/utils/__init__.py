"""
Module containing shared utility classes.
"""
from dataclasses import dataclass, fields
from typing import Any


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass(slots=True, frozen=True, kw_only=True)
class Config:
    """
    Config parent class that can conveniently set attributes from CLI args.

    Attributes missing from the source object, or set to ``None`` on it, keep the
    dataclass defaults.

    Examples:
        >>> @dataclass(slots=True, frozen=True, kw_only=True)
        ... class Example(Config):
        ...     width: int = 80
        >>> Example.from_obj(argparse.Namespace(width=None)).width
        80
    """
    @classmethod
    def from_obj(cls, obj: Any) -> 'Config':
        return cls(**{f.name: val for f in fields(cls) if (val := getattr(obj, f.name, None)) is not None})
