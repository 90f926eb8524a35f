"""
Criteria evaluator: check one eligibility criterion against a UserActivity.

Dispatch is a closed registry keyed by criterion type. Each variant has one
well-defined comparison. Anything outside the registry raises
UnknownCriterionError instead of quietly counting as "not met", so a bad
criteria list in the project store shows up as an error, not a lower score.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from airdrop_finder.core.exceptions import UnknownCriterionError
from airdrop_finder.eligibility.models import (
    CRITERION_TYPES,
    ChainActivity,
    ChainCountAtLeast,
    ChainTransactionCount,
    ContractInteraction,
    Criterion,
    CriterionResult,
    DateRange,
    HoldsNFT,
    MinTransactionCount,
    MinValueUSD,
    ProtocolInteraction,
    UserActivity,
)


def _min_transaction_count(c: MinTransactionCount, activity: UserActivity) -> bool:
    return activity.total_transaction_count >= c.min_count


def _chain_count_at_least(c: ChainCountAtLeast, activity: UserActivity) -> bool:
    return len(activity.chains_used) >= c.min_chains


def _contract_interaction(c: ContractInteraction, activity: UserActivity) -> bool:
    return c.address.lower() in activity.contracts_interacted


def _holds_nft(c: HoldsNFT, activity: UserActivity) -> bool:
    return c.contract.lower() in activity.nft_contracts_held


def _min_value_usd(c: MinValueUSD, activity: UserActivity) -> bool:
    return activity.total_value_usd >= c.min_value_usd


def _date_range(c: DateRange, activity: UserActivity) -> bool:
    last = activity.last_activity_unix
    if last is None:
        return False
    return c.start_unix <= last <= c.end_unix


def _protocol_interaction(c: ProtocolInteraction, activity: UserActivity) -> bool:
    wanted = c.protocol.lower()
    return any(p.lower() == wanted for p in activity.protocols_touched)


def _chain_activity(c: ChainActivity, activity: UserActivity) -> bool:
    return c.chain_id in activity.chains_used


def _chain_transaction_count(c: ChainTransactionCount, activity: UserActivity) -> bool:
    return activity.per_chain_transaction_count.get(c.chain_id, 0) >= c.min_count


_EVALUATORS: dict[type[Criterion], Callable[[Any, UserActivity], bool]] = {
    MinTransactionCount: _min_transaction_count,
    ChainCountAtLeast: _chain_count_at_least,
    ContractInteraction: _contract_interaction,
    HoldsNFT: _holds_nft,
    MinValueUSD: _min_value_usd,
    DateRange: _date_range,
    ProtocolInteraction: _protocol_interaction,
    ChainActivity: _chain_activity,
    ChainTransactionCount: _chain_transaction_count,
}


def criterion_tag(criterion: Any) -> str:
    """Tag for error reporting: the variant kind, else the object's type name."""
    kind = getattr(criterion, "kind", None)
    if isinstance(kind, str) and kind:
        return kind
    return type(criterion).__name__


def supported_kinds() -> frozenset[str]:
    """Criterion tags the evaluator can dispatch."""
    return frozenset(cls.kind for cls in _EVALUATORS)


def unsupported_kinds() -> frozenset[str]:
    """Declared variants with no evaluator. Must stay empty."""
    return frozenset(CRITERION_TYPES) - supported_kinds()


def evaluate_criterion(criterion: Criterion, activity: UserActivity) -> bool:
    """
    Return True iff the activity satisfies the criterion.

    Raises UnknownCriterionError for anything that is not a registered variant
    (exact type match; subclasses of a variant are not implicitly accepted).
    """
    evaluator = _EVALUATORS.get(type(criterion))
    if evaluator is None:
        raise UnknownCriterionError(criterion_tag(criterion))
    return bool(evaluator(criterion, activity))


def explain_criterion(criterion: Criterion, activity: UserActivity) -> CriterionResult:
    """Evaluate and pair the outcome with the criterion's human-readable description."""
    met = evaluate_criterion(criterion, activity)
    return CriterionResult(description=criterion.description, met=met, kind=criterion.kind)


def evaluate_criteria(
    criteria: Iterable[Criterion],
    activity: UserActivity,
) -> list[CriterionResult]:
    """Evaluate criteria in declaration order. The first unknown criterion aborts the list."""
    return [explain_criterion(c, activity) for c in criteria]
