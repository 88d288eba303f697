"""SchemaConfig and SchemaMode for schema generalization.

SchemaConfig is a frozen dataclass.  SchemaMode selects what a leaf retains:
only its type set, or additionally one representative value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto


class SchemaMode(StrEnum):
    """What a generalized leaf keeps.

    - TYPE_ONLY:    the observed type set only.
    - VALUE_SAMPLE: the type set plus the earliest-origin scalar value.
    """

    TYPE_ONLY = auto()
    VALUE_SAMPLE = auto()


@dataclass(frozen=True, slots=True)
class SchemaConfig:
    """Immutable configuration for the schema generalizer.

    Attributes:
        mode: Leaf construction mode.  Plain strings ("type_only",
            "value_sample") are coerced to SchemaMode.
    """

    mode: SchemaMode = SchemaMode.TYPE_ONLY

    def __post_init__(self) -> None:
        if not isinstance(self.mode, SchemaMode):
            try:
                object.__setattr__(self, "mode", SchemaMode(self.mode))
            except ValueError:
                msg = f"mode must be one of {[m.value for m in SchemaMode]}, got {self.mode!r}"
                raise ValueError(msg) from None
