"""A value that holds either an integer or a string."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class IntOrStringType(enum.IntEnum):
    """Which of the two values an IntOrString holds."""

    INT64 = 0
    STRING = 1


@dataclass(frozen=True)
class IntOrString:
    type: IntOrStringType
    int_val: int = 0
    str_val: str = ""

    def to_int(self) -> int:
        """Return the integer value; a string that is not an int64 gives 0."""
        if self.type is IntOrStringType.STRING:
            if not _INT_RE.fullmatch(self.str_val):
                return 0
            value = int(self.str_val)
            if not _INT64_MIN <= value <= _INT64_MAX:
                return 0
            return value
        return self.int_val

    def __str__(self) -> str:
        if self.type is IntOrStringType.STRING:
            return self.str_val
        return str(self.to_int())


def from_int64(val: int) -> IntOrString:
    return IntOrString(type=IntOrStringType.INT64, int_val=val)


def from_string(val: str) -> IntOrString:
    return IntOrString(type=IntOrStringType.STRING, str_val=val)