"""
Data models for the eligibility engine.

Raw chain records (ChainTransaction, ChainNFT) come from the external collector.
UserActivity, CriterionResult and ScoredProject are derived per request and are
pure functions of their inputs. Criterion is a closed family of frozen variants;
each carries its own threshold payload and a human-readable description.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


class ProjectStatus(str, Enum):
    """Airdrop project lifecycle status as published by the project store."""

    CONFIRMED = "confirmed"
    RUMORED = "rumored"
    ANNOUNCED = "announced"


@dataclass(frozen=True)
class ChainTransaction:
    """One on-chain transfer or call touching the wallet, as returned by the collector."""

    chain_id: int
    hash: str
    from_address: str
    to_address: str | None
    value_usd: float
    gas_usd: float
    timestamp_unix: int
    contract_address: str | None = None
    decoded_function_name: str | None = None
    contract_name: str | None = None
    """Token/contract name from the data provider (e.g. "Uniswap V3: Router"), when known."""
    contract_symbol: str | None = None
    """Token symbol from the data provider (e.g. "UNI-V3-POS"), when known."""


@dataclass(frozen=True)
class ChainNFT:
    """One NFT held by the wallet."""

    chain_id: int
    contract_address: str
    token_id: str
    acquired_at_unix: int


@dataclass(frozen=True)
class UserActivity:
    """
    Canonical activity profile for one address across all chains.

    total_transaction_count always equals sum(per_chain_transaction_count.values()).
    Address-valued sets are lower-cased; all sets are deduplicated.
    bridges_used and dexes_used are the subsets of protocols_touched categorized
    as bridge and dex.
    first/last_activity_unix are None when there are no transactions.
    """

    address: str
    chains_used: frozenset[int] = frozenset()
    total_transaction_count: int = 0
    per_chain_transaction_count: dict[int, int] = field(default_factory=dict)
    contracts_interacted: frozenset[str] = frozenset()
    protocols_touched: frozenset[str] = frozenset()
    bridges_used: frozenset[str] = frozenset()
    dexes_used: frozenset[str] = frozenset()
    nft_contracts_held: frozenset[str] = frozenset()
    total_value_usd: float = 0.0
    total_gas_usd: float = 0.0
    first_activity_unix: int | None = None
    last_activity_unix: int | None = None

    @classmethod
    def empty(cls, address: str) -> UserActivity:
        """Zero-valued profile: a valid shape for a wallet with no activity."""
        return cls(address=address)

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "chains_used": sorted(self.chains_used),
            "total_transaction_count": self.total_transaction_count,
            "per_chain_transaction_count": {
                str(k): v for k, v in sorted(self.per_chain_transaction_count.items())
            },
            "contracts_interacted": sorted(self.contracts_interacted),
            "protocols_touched": sorted(self.protocols_touched),
            "bridges_used": sorted(self.bridges_used),
            "dexes_used": sorted(self.dexes_used),
            "nft_contracts_held": sorted(self.nft_contracts_held),
            "total_value_usd": round(self.total_value_usd, 2),
            "total_gas_usd": round(self.total_gas_usd, 2),
            "first_activity_unix": self.first_activity_unix,
            "last_activity_unix": self.last_activity_unix,
        }


# --- Criteria ---


class Criterion:
    """
    Base of the closed criterion family. Concrete variants are frozen dataclasses
    with a `kind` tag, a threshold payload and a `description` (generated when empty).
    """

    kind: ClassVar[str] = "criterion"
    description: str

    def default_description(self) -> str:
        return self.kind

    def _fill_description(self) -> None:
        if not (self.description or "").strip():
            object.__setattr__(self, "description", self.default_description())

    def payload(self) -> dict[str, Any]:
        """Threshold payload without the description, for logs and serialization."""
        data = {k: v for k, v in self.__dict__.items() if k != "description"}
        return data

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, **self.payload(), "description": self.description}


@dataclass(frozen=True)
class MinTransactionCount(Criterion):
    kind: ClassVar[str] = "min_transaction_count"
    min_count: int
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_count", int(self.min_count))
        self._fill_description()

    def default_description(self) -> str:
        return f"At least {self.min_count} transactions"


@dataclass(frozen=True)
class ChainCountAtLeast(Criterion):
    kind: ClassVar[str] = "chain_count_at_least"
    min_chains: int
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_chains", int(self.min_chains))
        self._fill_description()

    def default_description(self) -> str:
        return f"Active on at least {self.min_chains} chains"


@dataclass(frozen=True)
class ContractInteraction(Criterion):
    kind: ClassVar[str] = "contract_interaction"
    address: str
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", str(self.address).strip().lower())
        self._fill_description()

    def default_description(self) -> str:
        return f"Interacted with contract {self.address}"


@dataclass(frozen=True)
class HoldsNFT(Criterion):
    kind: ClassVar[str] = "holds_nft"
    contract: str
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "contract", str(self.contract).strip().lower())
        self._fill_description()

    def default_description(self) -> str:
        return f"Holds an NFT from {self.contract}"


@dataclass(frozen=True)
class MinValueUSD(Criterion):
    kind: ClassVar[str] = "min_value_usd"
    min_value_usd: float
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_value_usd", float(self.min_value_usd))
        self._fill_description()

    def default_description(self) -> str:
        return f"Moved at least ${self.min_value_usd:,.2f}"


@dataclass(frozen=True)
class DateRange(Criterion):
    kind: ClassVar[str] = "date_range"
    start_unix: int
    end_unix: int
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_unix", int(self.start_unix))
        object.__setattr__(self, "end_unix", int(self.end_unix))
        if self.start_unix > self.end_unix:
            raise ValueError(f"date_range start {self.start_unix} is after end {self.end_unix}")
        self._fill_description()

    def default_description(self) -> str:
        return f"Active between {self.start_unix} and {self.end_unix}"


@dataclass(frozen=True)
class ProtocolInteraction(Criterion):
    kind: ClassVar[str] = "protocol_interaction"
    protocol: str
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "protocol", str(self.protocol).strip())
        self._fill_description()

    def default_description(self) -> str:
        return f"Used {self.protocol}"


@dataclass(frozen=True)
class ChainActivity(Criterion):
    kind: ClassVar[str] = "chain_activity"
    chain_id: int
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "chain_id", int(self.chain_id))
        self._fill_description()

    def default_description(self) -> str:
        return f"Active on chain {self.chain_id}"


@dataclass(frozen=True)
class ChainTransactionCount(Criterion):
    kind: ClassVar[str] = "chain_transaction_count"
    chain_id: int
    min_count: int
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "chain_id", int(self.chain_id))
        object.__setattr__(self, "min_count", int(self.min_count))
        self._fill_description()

    def default_description(self) -> str:
        return f"At least {self.min_count} transactions on chain {self.chain_id}"


# Every declared variant, keyed by tag. The evaluator must cover all of them.
CRITERION_TYPES: dict[str, type[Criterion]] = {
    cls.kind: cls
    for cls in (
        MinTransactionCount,
        ChainCountAtLeast,
        ContractInteraction,
        HoldsNFT,
        MinValueUSD,
        DateRange,
        ProtocolInteraction,
        ChainActivity,
        ChainTransactionCount,
    )
}


@dataclass(frozen=True)
class CriterionResult:
    """Outcome of one criterion for one profile. Never cached on its own."""

    description: str
    met: bool
    kind: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"description": self.description, "met": self.met, "kind": self.kind}


# --- Projects and scores ---


@dataclass(frozen=True)
class Project:
    """Airdrop project owned by the external project store."""

    project_id: str
    name: str
    status: ProjectStatus
    criteria: tuple[Criterion, ...] = ()
    chains: tuple[int, ...] = ()
    snapshot_unix: int | None = None
    estimated_value_usd: float | None = None
    claim_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "name": self.name,
            "status": self.status.value,
            "criteria": [c.to_dict() for c in self.criteria],
            "chains": list(self.chains),
            "snapshot_unix": self.snapshot_unix,
            "estimated_value_usd": self.estimated_value_usd,
            "claim_url": self.claim_url,
        }


@dataclass(frozen=True)
class ScoredProject:
    """
    Score of one project against one profile.

    current_score: share of criteria met, 0-100.
    opportunity_score: current_score adjusted for status, snapshot proximity,
    known value and remaining effort; clamped to 0-100.
    days_until_snapshot: set only when the snapshot is in the future.
    """

    project_id: str
    name: str
    status: ProjectStatus
    current_score: int
    opportunity_score: int
    effort_needed: int
    missing_criteria: tuple[str, ...]
    criteria_results: tuple[CriterionResult, ...] = ()
    estimated_value_usd: float | None = None
    days_until_snapshot: int | None = None
    snapshot_unix: int | None = None
    claim_url: str | None = None
    chains: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "name": self.name,
            "status": self.status.value,
            "current_score": self.current_score,
            "opportunity_score": self.opportunity_score,
            "effort_needed": self.effort_needed,
            "missing_criteria": list(self.missing_criteria),
            "criteria": [r.to_dict() for r in self.criteria_results],
            "estimated_value_usd": self.estimated_value_usd,
            "days_until_snapshot": self.days_until_snapshot,
            "snapshot_unix": self.snapshot_unix,
            "claim_url": self.claim_url,
            "chains": list(self.chains),
        }


@dataclass(frozen=True)
class ProjectScoringFailure:
    """A project that could not be scored; other projects in the batch are unaffected."""

    project_id: str
    error_type: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "error_type": self.error_type,
            "message": self.message,
        }


@dataclass
class BatchScoreResult:
    """Scored projects plus per-project failures, in input order."""

    scored: list[ScoredProject] = field(default_factory=list)
    failures: list[ProjectScoringFailure] = field(default_factory=list)


@dataclass(frozen=True)
class RankedOpportunities:
    """Ranker output. Category membership is non-exclusive."""

    all: tuple[ScoredProject, ...] = ()
    easy_wins: tuple[ScoredProject, ...] = ()
    high_value: tuple[ScoredProject, ...] = ()
    quick_actions: tuple[ScoredProject, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "opportunities": [p.to_dict() for p in self.all],
            "categories": {
                "easy_wins": [p.to_dict() for p in self.easy_wins],
                "high_value": [p.to_dict() for p in self.high_value],
                "quick_actions": [p.to_dict() for p in self.quick_actions],
            },
        }
