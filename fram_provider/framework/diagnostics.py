"""Diagnostics collected while running a lifecycle operation.

Lifecycle calls never raise for expected failures; they append error or
warning diagnostics which the caller inspects with ``has_error()``.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, Iterator, List, Optional

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    summary: str
    detail: str = ""
    attribute: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)

    def __str__(self) -> str:
        where = f" ({self.attribute})" if self.attribute else ""
        detail = f": {self.detail}" if self.detail else ""
        return f"{self.severity.upper()}{where} {self.summary}{detail}"


class Diagnostics:
    """Ordered collection of diagnostics."""

    def __init__(self, items: Optional[Iterable[Diagnostic]] = None):
        self._items: List[Diagnostic] = list(items or [])

    def add_error(self, summary: str, detail: str = "", attribute: Optional[str] = None) -> None:
        self._items.append(Diagnostic(ERROR, summary, detail, attribute))

    def add_warning(self, summary: str, detail: str = "", attribute: Optional[str] = None) -> None:
        self._items.append(Diagnostic(WARNING, summary, detail, attribute))

    def append(self, *others: "Diagnostics") -> None:
        for other in others:
            self._items.extend(other)

    def has_error(self) -> bool:
        return any(item.severity == ERROR for item in self._items)

    def errors(self) -> List[Diagnostic]:
        return [item for item in self._items if item.severity == ERROR]

    def to_list(self) -> List[Dict[str, Optional[str]]]:
        return [item.to_dict() for item in self._items]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Diagnostics({self._items!r})"
