"""
Recommendations: what to do next for projects the wallet partly qualifies for.

Only projects with room to improve (20 <= current_score < 90) are recommended.
Each missing criterion gets an actionable flag, a priority and a rough effort
label. Confirmed projects sort first, then the largest score gap.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from airdrop_finder.eligibility.models import ProjectStatus, ScoredProject

MIN_SCORE = 20
MAX_SCORE = 90
POTENTIAL_SCORE = 100
DEFAULT_LIMIT = 10

PRIORITY_HIGH = "high"
PRIORITY_MEDIUM = "medium"
PRIORITY_LOW = "low"

EFFORT_LOW = "Low (Single transaction)"
EFFORT_MEDIUM = "Medium"
EFFORT_HIGH = "High (Multiple transactions)"

# Criteria a user can satisfy with a direct on-chain action (bridge, swap, mint, deposit)
ACTIONABLE_KINDS = frozenset({
    "contract_interaction",
    "protocol_interaction",
    "holds_nft",
    "chain_activity",
})

EFFORT_BY_KIND = {
    "min_transaction_count": EFFORT_HIGH,
    "chain_transaction_count": EFFORT_HIGH,
    "chain_count_at_least": EFFORT_HIGH,
    "contract_interaction": EFFORT_LOW,
    "protocol_interaction": EFFORT_LOW,
    "holds_nft": EFFORT_LOW,
    "chain_activity": EFFORT_LOW,
}


@dataclass(frozen=True)
class MissingCriterion:
    description: str
    actionable: bool
    priority: str
    estimated_effort: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "actionable": self.actionable,
            "priority": self.priority,
            "estimated_effort": self.estimated_effort,
        }


@dataclass(frozen=True)
class Recommendation:
    project_id: str
    name: str
    status: ProjectStatus
    current_score: int
    potential_score: int
    score_delta: int
    missing_criteria: tuple[MissingCriterion, ...]
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "name": self.name,
            "status": self.status.value,
            "current_score": self.current_score,
            "potential_score": self.potential_score,
            "score_delta": self.score_delta,
            "missing_criteria": [m.to_dict() for m in self.missing_criteria],
            "reason": self.reason,
        }


def _priority(project: ScoredProject) -> str:
    if project.status == ProjectStatus.CONFIRMED or project.current_score > 50:
        return PRIORITY_HIGH
    if project.current_score < 30:
        return PRIORITY_LOW
    return PRIORITY_MEDIUM


def _reason(project: ScoredProject, missing: tuple[MissingCriterion, ...]) -> str:
    actionable = sum(1 for m in missing if m.actionable)
    if project.status == ProjectStatus.CONFIRMED and project.current_score >= 50:
        return (
            f"High priority! This is a confirmed airdrop and you're already "
            f"{project.current_score}% eligible. Complete remaining criteria to maximize rewards."
        )
    if project.status == ProjectStatus.CONFIRMED:
        return f"Confirmed airdrop with {actionable} actionable steps remaining."
    if project.current_score >= 60:
        return (
            f"You're {project.current_score}% eligible. Just {len(missing)} more "
            f"criteria to maximize your chances."
        )
    return f"Potential airdrop opportunity. Complete {actionable} actions to improve eligibility."


def recommend_for_project(project: ScoredProject) -> Recommendation | None:
    """Recommendation for one scored project, or None when out of the useful score band."""
    if project.current_score < MIN_SCORE or project.current_score >= MAX_SCORE:
        return None
    priority = _priority(project)
    missing = tuple(
        MissingCriterion(
            description=r.description,
            actionable=r.kind in ACTIONABLE_KINDS,
            priority=priority,
            estimated_effort=EFFORT_BY_KIND.get(r.kind, EFFORT_MEDIUM),
        )
        for r in project.criteria_results
        if not r.met
    )
    return Recommendation(
        project_id=project.project_id,
        name=project.name,
        status=project.status,
        current_score=project.current_score,
        potential_score=POTENTIAL_SCORE,
        score_delta=POTENTIAL_SCORE - project.current_score,
        missing_criteria=missing,
        reason=_reason(project, missing),
    )


def build_recommendations(
    scored_projects: Iterable[ScoredProject],
    limit: int = DEFAULT_LIMIT,
) -> list[Recommendation]:
    """Recommendations sorted confirmed-first, then by score_delta desc, then project_id."""
    recs = [r for r in (recommend_for_project(p) for p in scored_projects) if r is not None]
    recs.sort(
        key=lambda r: (
            0 if r.status == ProjectStatus.CONFIRMED else 1,
            -r.score_delta,
            r.project_id,
        )
    )
    return recs[:limit]


def summarize_recommendations(recs: Iterable[Recommendation]) -> dict[str, int]:
    """Totals shown alongside the list: high-priority projects, actionable steps, score gain."""
    recs = list(recs)
    return {
        "total_recommendations": len(recs),
        "high_priority": sum(
            1 for r in recs if any(m.priority == PRIORITY_HIGH for m in r.missing_criteria)
        ),
        "actionable_steps": sum(sum(1 for m in r.missing_criteria if m.actionable) for r in recs),
        "potential_score_gain": sum(r.score_delta for r in recs),
    }
