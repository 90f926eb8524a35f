"""
Project payload parsing and the project repository seam.

The project store is external; it hands over JSON-shaped dicts. Criteria are
tagged by "type" and carry their threshold fields inline:

    {"type": "min_transaction_count", "min_count": 10, "description": "10+ txs"}

Unknown types raise UnknownCriterionError; missing or mistyped fields raise
InvalidProjectError.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping, Protocol

from airdrop_finder.core.exceptions import InvalidProjectError, UnknownCriterionError
from airdrop_finder.eligibility.models import CRITERION_TYPES, Criterion, Project, ProjectStatus


def criterion_from_dict(data: Mapping[str, Any], project_id: str | None = None) -> Criterion:
    if not isinstance(data, Mapping):
        raise InvalidProjectError(f"criterion must be an object, got {type(data).__name__}", project_id)
    kind = str(data.get("type") or "").strip()
    cls = CRITERION_TYPES.get(kind)
    if cls is None:
        raise UnknownCriterionError(kind or "<missing>", project_id=project_id)

    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.name in data:
            kwargs[f.name] = data[f.name]
        elif f.default is dataclasses.MISSING:
            raise InvalidProjectError(f"criterion {kind!r} is missing field {f.name!r}", project_id)
    if kwargs.get("description") is None:
        kwargs["description"] = ""
    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise InvalidProjectError(f"criterion {kind!r}: {e}", project_id) from e


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


def project_from_dict(data: Mapping[str, Any]) -> Project:
    """Build a Project from a store payload. Status is case-insensitive."""
    if not isinstance(data, Mapping):
        raise InvalidProjectError(f"project must be an object, got {type(data).__name__}")
    project_id = str(data.get("project_id") or data.get("id") or "").strip()
    if not project_id:
        raise InvalidProjectError("project is missing 'project_id'")
    name = str(data.get("name") or project_id)

    raw_status = str(data.get("status") or "").strip().lower()
    try:
        status = ProjectStatus(raw_status)
    except ValueError as e:
        raise InvalidProjectError(f"unknown project status {raw_status!r}", project_id) from e

    raw_criteria = data.get("criteria") or []
    if not isinstance(raw_criteria, (list, tuple)):
        raise InvalidProjectError("'criteria' must be a list", project_id)
    criteria = tuple(criterion_from_dict(c, project_id) for c in raw_criteria)

    try:
        return Project(
            project_id=project_id,
            name=name,
            status=status,
            criteria=criteria,
            chains=tuple(int(c) for c in data.get("chains") or ()),
            snapshot_unix=_optional_int(data.get("snapshot_unix")),
            estimated_value_usd=_optional_float(data.get("estimated_value_usd")),
            claim_url=data.get("claim_url"),
        )
    except (TypeError, ValueError) as e:
        raise InvalidProjectError(f"invalid project field: {e}", project_id) from e


class ProjectRepository(Protocol):
    def list_projects(self) -> list[Project]: ...


class InMemoryProjectRepository:
    """Project store held in memory; built from Project objects or raw payloads."""

    def __init__(self, projects: Iterable[Project] = ()) -> None:
        self._projects: dict[str, Project] = {}
        for p in projects:
            self.add(p)

    @classmethod
    def from_dicts(cls, payloads: Iterable[Mapping[str, Any]]) -> InMemoryProjectRepository:
        return cls(project_from_dict(p) for p in payloads)

    def add(self, project: Project) -> None:
        self._projects[project.project_id] = project

    def get(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def list_projects(self) -> list[Project]:
        return list(self._projects.values())
