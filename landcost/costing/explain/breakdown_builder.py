from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class BreakdownKind(str, Enum):
    STEP = "STEP"  # arithmetic behind a figure
    UNDEFINED = "UNDEFINED"  # figure cannot be computed, e.g. no exchange rate
    WARNING = "WARNING"  # figure computed from a fallback
    META = "META"  # context only, no figure


_PREFIX = {
    BreakdownKind.STEP: "",
    BreakdownKind.UNDEFINED: "UNDEFINED: ",
    BreakdownKind.WARNING: "WARNING: ",
    BreakdownKind.META: "META: ",
}

_CODE_RE = re.compile(r"^[A-Z][A-Z0-9_]{2,63}$")  # PURCHASE, FEE_SHARE, UNKNOWN_DELIVERY

MAX_MESSAGE_LEN = 240


def _check_entry(code: str, message: str) -> None:
    if not _CODE_RE.match(code):
        raise ValueError(f"invalid breakdown code {code!r}, expected UPPER_SNAKE")
    if not message.strip():
        raise ValueError("breakdown message must be non-empty")
    # one line per entry: the JSON report, the text report and logs print it as-is
    if any(c in message for c in "\r\n\t"):
        raise ValueError("breakdown message may not contain newlines or tabs")
    if len(message) > MAX_MESSAGE_LEN:
        raise ValueError(f"breakdown message too long (max {MAX_MESSAGE_LEN} chars)")


@dataclass(frozen=True)
class BreakdownEntry:
    kind: BreakdownKind
    code: str
    message: str

    def render(self) -> str:
        return _PREFIX[self.kind] + self.message


@dataclass
class Breakdown:
    """Explain trail of one order line, in the order the calculators wrote it."""

    entries: List[BreakdownEntry] = field(default_factory=list)

    def add_step(self, code: str, message: str) -> None:
        self._add(BreakdownKind.STEP, code, message)

    def add_undefined(self, code: str, message: str) -> None:
        self._add(BreakdownKind.UNDEFINED, code, message)

    def add_warning(self, code: str, message: str) -> None:
        self._add(BreakdownKind.WARNING, code, message)

    def add_meta(self, code: str, message: str) -> None:
        self._add(BreakdownKind.META, code, message)

    def codes(self, kind: Optional[BreakdownKind] = None) -> List[str]:
        return [e.code for e in self.entries if kind is None or e.kind == kind]

    def as_strings(self) -> List[str]:
        return [e.render() for e in self.entries]

    def _add(self, kind: BreakdownKind, code: str, message: str) -> None:
        code, message = code.strip(), message.strip()
        _check_entry(code, message)
        self.entries.append(BreakdownEntry(kind=kind, code=code, message=message))
