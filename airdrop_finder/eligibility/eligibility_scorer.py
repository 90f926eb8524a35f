"""
Eligibility scorer: completion score and opportunity score for one project.

current_score = round(100 * met / total) (0 when the project has no criteria).
opportunity_score = current_score
    + 20 if confirmed
    + 30 if snapshot in <= 30 days, else + 20 if <= 90 days (future snapshots only)
    + 15 if an estimated value is published
    - 5 per unmet criterion
clamped to 0-100. The snapshot bonus is the only clock-dependent step, so
"now" is always injectable.
"""

from __future__ import annotations

import math
import time
from typing import Iterable

from airdrop_finder.core.exceptions import AirdropFinderError, UnknownCriterionError
from airdrop_finder.eligibility.criteria_evaluator import evaluate_criteria
from airdrop_finder.eligibility.models import (
    BatchScoreResult,
    Project,
    ProjectScoringFailure,
    ProjectStatus,
    ScoredProject,
    UserActivity,
)
from airdrop_finder.finder_logging import get_logger, short_address

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400

CONFIRMED_BONUS = 20
SNAPSHOT_NEAR_DAYS = 30
SNAPSHOT_NEAR_BONUS = 30
SNAPSHOT_MID_DAYS = 90
SNAPSHOT_MID_BONUS = 20
ESTIMATED_VALUE_BONUS = 15
EFFORT_PENALTY_PER_CRITERION = 5
SCORE_MIN = 0
SCORE_MAX = 100


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def completion_score(met: int, total: int) -> int:
    """Percentage of criteria met, rounded half up. No criteria -> 0 (never "complete")."""
    if total <= 0:
        return 0
    return _round_half_up(100 * met / total)


def days_until_snapshot(snapshot_unix: int | None, now_ts: int) -> int | None:
    """Whole days (rounded up) until a future snapshot; None when absent or already past."""
    if snapshot_unix is None or snapshot_unix <= now_ts:
        return None
    return math.ceil((snapshot_unix - now_ts) / SECONDS_PER_DAY)


def snapshot_bonus(days_until: int | None) -> int:
    if days_until is None:
        return 0
    if days_until <= SNAPSHOT_NEAR_DAYS:
        return SNAPSHOT_NEAR_BONUS
    if days_until <= SNAPSHOT_MID_DAYS:
        return SNAPSHOT_MID_BONUS
    return 0


def opportunity_score(
    current_score: int,
    status: ProjectStatus,
    days_until: int | None,
    has_estimated_value: bool,
    effort_needed: int,
) -> int:
    """Adjusted ranking metric, clamped to 0-100."""
    score = current_score
    if status == ProjectStatus.CONFIRMED:
        score += CONFIRMED_BONUS
    score += snapshot_bonus(days_until)
    if has_estimated_value:
        score += ESTIMATED_VALUE_BONUS
    score -= EFFORT_PENALTY_PER_CRITERION * effort_needed
    return max(SCORE_MIN, min(SCORE_MAX, score))


def score_project(
    project: Project,
    activity: UserActivity,
    now_ts: int | None = None,
) -> ScoredProject:
    """
    Score one project against one activity profile.

    Raises UnknownCriterionError (with project_id set) when any criterion is
    not a known variant; partial scores are never returned.
    """
    if now_ts is None:
        now_ts = int(time.time())
    try:
        results = evaluate_criteria(project.criteria, activity)
    except UnknownCriterionError as e:
        raise UnknownCriterionError(e.tag, project_id=project.project_id) from e

    total = len(results)
    met = sum(1 for r in results if r.met)
    effort = total - met
    current = completion_score(met, total)
    days_until = days_until_snapshot(project.snapshot_unix, now_ts)
    opportunity = opportunity_score(
        current,
        project.status,
        days_until,
        project.estimated_value_usd is not None,
        effort,
    )

    scored = ScoredProject(
        project_id=project.project_id,
        name=project.name,
        status=project.status,
        current_score=current,
        opportunity_score=opportunity,
        effort_needed=effort,
        missing_criteria=tuple(r.description for r in results if not r.met),
        criteria_results=tuple(results),
        estimated_value_usd=project.estimated_value_usd,
        days_until_snapshot=days_until,
        snapshot_unix=project.snapshot_unix,
        claim_url=project.claim_url,
        chains=tuple(project.chains),
    )
    logger.debug(
        "project_scored",
        address=short_address(activity.address),
        project_id=project.project_id,
        met=met,
        total=total,
        current_score=current,
        opportunity_score=opportunity,
    )
    return scored


def score_projects(
    projects: Iterable[Project],
    activity: UserActivity,
    now_ts: int | None = None,
) -> BatchScoreResult:
    """
    Score a batch of projects with per-project isolation.

    A project that fails (unknown criterion, malformed payload) is recorded in
    `failures` and logged; every other project is still scored. All projects
    share the same "now".
    """
    if now_ts is None:
        now_ts = int(time.time())
    batch = BatchScoreResult()
    for project in projects:
        try:
            batch.scored.append(score_project(project, activity, now_ts=now_ts))
        except (AirdropFinderError, TypeError, ValueError) as e:
            project_id = getattr(project, "project_id", "?")
            logger.warning(
                "project_scoring_failed",
                address=short_address(activity.address),
                project_id=project_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            batch.failures.append(
                ProjectScoringFailure(
                    project_id=str(project_id),
                    error_type=type(e).__name__,
                    message=str(e),
                )
            )
    return batch
