"""Cross-domain import tracking for one domain's emission unit."""

from __future__ import annotations

from collections.abc import Iterable


class DependencyTracker:
    """Accumulate the domains a unit must import, each at most once.

    Deduplication is keyed by the leading domain segment, not the full Ref,
    so ``Runtime.RemoteObject`` and ``Runtime.ScriptId`` share one import.
    Bare Refs and Refs into the tracked domain itself never register.
    """

    def __init__(self, domain: str, explicit: Iterable[str] | None = None) -> None:
        self.domain = domain
        self._imports: dict[str, None] = {}
        for name in explicit or ():
            self._add(name.strip())

    def _add(self, segment: str) -> bool:
        if not segment or segment == self.domain or segment in self._imports:
            return False
        self._imports[segment] = None
        return True

    def register(self, ref: str) -> str | None:
        """Register the domain segment of *ref*.

        Returns the segment when it was newly added, otherwise None.
        """
        segment, sep, _name = ref.partition(".")
        if not sep:
            return None
        return segment if self._add(segment) else None

    @property
    def imports(self) -> tuple[str, ...]:
        """Registered domains in discovery order."""
        return tuple(self._imports)

    def __contains__(self, segment: object) -> bool:
        return segment in self._imports

    def __len__(self) -> int:
        return len(self._imports)
