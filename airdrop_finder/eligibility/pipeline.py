"""
Eligibility pipeline: collect -> aggregate -> score -> rank, behind the result cache.

Single entrypoint for every consumer that needs eligibility for an address
(opportunity finder, recommendations, report tooling). Each entry point is
cached under its own namespace, keyed by address, project-id set and filter.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

from airdrop_finder.cache import ResultCache, build_cache_key
from airdrop_finder.config import get_settings
from airdrop_finder.eligibility.activity_aggregator import aggregate_activity
from airdrop_finder.eligibility.eligibility_scorer import score_projects
from airdrop_finder.eligibility.models import (
    Project,
    ProjectScoringFailure,
    ProjectStatus,
    RankedOpportunities,
    ScoredProject,
    UserActivity,
)
from airdrop_finder.eligibility.opportunity_ranker import rank_opportunities
from airdrop_finder.eligibility.projects import InMemoryProjectRepository, ProjectRepository
from airdrop_finder.eligibility.recommendations import (
    DEFAULT_LIMIT,
    Recommendation,
    build_recommendations,
)
from airdrop_finder.finder_logging import get_logger, short_address

if TYPE_CHECKING:
    from airdrop_finder.ingestion.collector import ChainDataCollector, CollectedChainData

logger = get_logger(__name__)

NAMESPACE_ELIGIBILITY = "eligibility"
NAMESPACE_OPPORTUNITIES = "opportunities"
NAMESPACE_RECOMMENDATIONS = "recommendations"

OPPORTUNITY_STATUSES = (ProjectStatus.CONFIRMED, ProjectStatus.RUMORED)


@dataclass(frozen=True)
class EligibilityReport:
    """Every scored project for one address, plus isolated failures and missing chains."""

    address: str
    activity: UserActivity
    scored: tuple[ScoredProject, ...] = ()
    failures: tuple[ProjectScoringFailure, ...] = ()
    unavailable_chains: tuple[int, ...] = ()
    generated_at_unix: int = 0

    @property
    def partial_data(self) -> bool:
        return bool(self.unavailable_chains)

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "activity": self.activity.to_dict(),
            "projects": [p.to_dict() for p in self.scored],
            "failures": [f.to_dict() for f in self.failures],
            "unavailable_chains": list(self.unavailable_chains),
            "partial_data": self.partial_data,
            "generated_at_unix": self.generated_at_unix,
        }


@dataclass(frozen=True)
class OpportunityReport:
    address: str
    ranked: RankedOpportunities
    failures: tuple[ProjectScoringFailure, ...] = ()
    unavailable_chains: tuple[int, ...] = ()
    generated_at_unix: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            **self.ranked.to_dict(),
            "total_found": len(self.ranked.all),
            "failures": [f.to_dict() for f in self.failures],
            "unavailable_chains": list(self.unavailable_chains),
            "partial_data": bool(self.unavailable_chains),
            "generated_at_unix": self.generated_at_unix,
        }


def normalize_address(address: str) -> str:
    return (address or "").strip().lower()


def _filter_projects(
    projects: Iterable[Project],
    statuses: Iterable[ProjectStatus] | None,
) -> list[Project]:
    if statuses is None:
        return list(projects)
    wanted = {ProjectStatus(s) for s in statuses}
    return [p for p in projects if p.status in wanted]


def run_eligibility_analysis(
    address: str,
    chain_data: CollectedChainData,
    projects: Iterable[Project],
    now_ts: int | None = None,
) -> EligibilityReport:
    """
    Aggregate already-collected chain data and score every project against it.

    Pure apart from logging: no fetch, no cache. Chains listed as unavailable in
    chain_data are carried through to the report.
    """
    address = normalize_address(address)
    if now_ts is None:
        now_ts = int(time.time())
    activity = aggregate_activity(address, chain_data.transactions, chain_data.nfts)
    batch = score_projects(projects, activity, now_ts=now_ts)
    unavailable = tuple(sorted(chain_data.unavailable_chains))
    if unavailable:
        logger.warning(
            "partial_chain_data",
            address=short_address(address),
            unavailable_chains=list(unavailable),
        )
    logger.info(
        "eligibility_analysis_done",
        address=short_address(address),
        scored=len(batch.scored),
        failed=len(batch.failures),
    )
    return EligibilityReport(
        address=address,
        activity=activity,
        scored=tuple(batch.scored),
        failures=tuple(batch.failures),
        unavailable_chains=unavailable,
        generated_at_unix=now_ts,
    )


class EligibilityPipeline:
    """Cached eligibility, opportunity and recommendation entry points for one project set."""

    def __init__(
        self,
        projects: ProjectRepository | Iterable[Project],
        collector: ChainDataCollector,
        cache: ResultCache | None = None,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not hasattr(projects, "list_projects"):
            projects = InMemoryProjectRepository(projects)
        self.repository: ProjectRepository = projects
        self.collector = collector
        self.clock = clock
        self.cache = cache if cache is not None else ResultCache(clock=clock)
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else get_settings().cache_ttl_sec

    def list_projects(self) -> list[Project]:
        return list(self.repository.list_projects())

    def _key(self, namespace: str, address: str, projects: list[Project], **filters: Any) -> str:
        return build_cache_key(
            namespace,
            address,
            {"projects": sorted(p.project_id for p in projects), **filters},
        )

    def _analyze(self, address: str, projects: list[Project]) -> EligibilityReport:
        """
        Fresh collection and scoring, never read from the cache. Opportunity and
        recommendation reports build on this so they are at most one TTL old.
        """
        logger.info("eligibility_check_start", address=short_address(address), projects=len(projects))
        chain_data = self.collector.collect(address)
        return run_eligibility_analysis(address, chain_data, projects, now_ts=int(self.clock()))

    def check_eligibility(
        self,
        address: str,
        statuses: Iterable[ProjectStatus] | None = None,
    ) -> EligibilityReport:
        address = normalize_address(address)
        status_list = None if statuses is None else sorted(ProjectStatus(s).value for s in statuses)
        projects = _filter_projects(self.list_projects(), status_list)
        key = self._key(NAMESPACE_ELIGIBILITY, address, projects, statuses=status_list)

        def compute() -> EligibilityReport:
            return self._analyze(address, projects)

        return self.cache.get_or_compute(key, self.ttl_seconds, compute)

    def find_opportunities(
        self,
        address: str,
        statuses: Iterable[ProjectStatus] | None = OPPORTUNITY_STATUSES,
    ) -> OpportunityReport:
        address = normalize_address(address)
        status_list = None if statuses is None else sorted(ProjectStatus(s).value for s in statuses)
        projects = _filter_projects(self.list_projects(), status_list)
        key = self._key(NAMESPACE_OPPORTUNITIES, address, projects, statuses=status_list)

        def compute() -> OpportunityReport:
            report = self._analyze(address, projects)
            ranked = rank_opportunities(report.scored)
            logger.info(
                "opportunities_ranked",
                address=short_address(address),
                total=len(ranked.all),
                easy_wins=len(ranked.easy_wins),
                high_value=len(ranked.high_value),
                quick_actions=len(ranked.quick_actions),
            )
            return OpportunityReport(
                address=address,
                ranked=ranked,
                failures=report.failures,
                unavailable_chains=report.unavailable_chains,
                generated_at_unix=report.generated_at_unix,
            )

        return self.cache.get_or_compute(key, self.ttl_seconds, compute)

    def recommend(self, address: str, limit: int = DEFAULT_LIMIT) -> list[Recommendation]:
        address = normalize_address(address)
        projects = self.list_projects()
        key = self._key(NAMESPACE_RECOMMENDATIONS, address, projects, limit=limit)

        def compute() -> list[Recommendation]:
            report = self._analyze(address, projects)
            recs = build_recommendations(report.scored, limit=limit)
            logger.info("recommendations_built", address=short_address(address), count=len(recs))
            return recs

        return list(self.cache.get_or_compute(key, self.ttl_seconds, compute))
