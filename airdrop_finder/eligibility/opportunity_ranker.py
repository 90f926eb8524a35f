"""
Opportunity ranker: order scored projects and bucket them into categories.

Fully satisfied projects (current_score 100) are dropped: nothing left to do.
Order: opportunity_score desc, effort_needed asc, project_id asc.
`all` is the top 20; categories are taken from `all` in ranked order, top 5
each, and may overlap.
"""

from __future__ import annotations

from typing import Callable, Iterable

from airdrop_finder.eligibility.models import RankedOpportunities, ScoredProject

ALL_LIMIT = 20
CATEGORY_LIMIT = 5

EASY_WIN_MAX_EFFORT = 2
EASY_WIN_MIN_SCORE = 50
HIGH_VALUE_MIN_SCORE = 30
QUICK_ACTION_MAX_DAYS = 30
QUICK_ACTION_MIN_SCORE = 40


def rank_key(project: ScoredProject) -> tuple[int, int, str]:
    return (-project.opportunity_score, project.effort_needed, project.project_id)


def is_easy_win(project: ScoredProject) -> bool:
    return project.effort_needed <= EASY_WIN_MAX_EFFORT and project.current_score >= EASY_WIN_MIN_SCORE


def is_high_value(project: ScoredProject) -> bool:
    return project.estimated_value_usd is not None and project.current_score >= HIGH_VALUE_MIN_SCORE


def is_quick_action(project: ScoredProject) -> bool:
    days = project.days_until_snapshot
    return days is not None and days <= QUICK_ACTION_MAX_DAYS and project.current_score >= QUICK_ACTION_MIN_SCORE


def _take(
    ranked: Iterable[ScoredProject],
    predicate: Callable[[ScoredProject], bool],
    limit: int,
) -> tuple[ScoredProject, ...]:
    out: list[ScoredProject] = []
    for p in ranked:
        if len(out) >= limit:
            break
        if predicate(p):
            out.append(p)
    return tuple(out)


def rank_opportunities(
    scored_projects: Iterable[ScoredProject],
    *,
    all_limit: int = ALL_LIMIT,
    category_limit: int = CATEGORY_LIMIT,
) -> RankedOpportunities:
    """Rank actionable projects and build the easy-win / high-value / quick-action buckets."""
    actionable = [p for p in scored_projects if p.current_score < 100]
    ranked = sorted(actionable, key=rank_key)[:all_limit]
    return RankedOpportunities(
        all=tuple(ranked),
        easy_wins=_take(ranked, is_easy_win, category_limit),
        high_value=_take(ranked, is_high_value, category_limit),
        quick_actions=_take(ranked, is_quick_action, category_limit),
    )
