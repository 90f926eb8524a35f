"""
Application-level exceptions.

Every error raised by the engine derives from AirdropFinderError so callers
can isolate failures per project or per chain without catching unrelated bugs.
"""

from __future__ import annotations

from typing import Iterable


class AirdropFinderError(Exception):
    """Base class for Airdrop Finder errors."""


class UnknownCriterionError(AirdropFinderError):
    """A criterion tag the evaluator does not recognize (data/configuration bug)."""

    def __init__(self, tag: str, project_id: str | None = None) -> None:
        self.tag = tag
        self.project_id = project_id
        where = f" in project {project_id!r}" if project_id else ""
        super().__init__(f"Unknown criterion type {tag!r}{where}")


class InvalidProjectError(AirdropFinderError):
    """A project or criterion payload from the store is malformed."""

    def __init__(self, message: str, project_id: str | None = None) -> None:
        self.project_id = project_id
        super().__init__(message)


class CacheUnavailableError(AirdropFinderError):
    """The cache backing store cannot be reached. Callers fall back to direct computation."""


class PartialDataWarning(UserWarning):
    """
    Data collection failed for some chains; results use empty lists for them.

    Not raised to abort anything: carried alongside collected data so callers
    can show a "data may be incomplete" notice.
    """

    def __init__(self, unavailable_chains: Iterable[int]) -> None:
        self.unavailable_chains = tuple(sorted(set(unavailable_chains)))
        chains = ", ".join(str(c) for c in self.unavailable_chains)
        super().__init__(f"Chain data unavailable for: {chains}")
