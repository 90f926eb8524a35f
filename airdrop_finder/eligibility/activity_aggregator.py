"""
Activity aggregator: fold per-chain transactions and NFTs into one UserActivity.

Pure function of its inputs; no network, storage or wall clock. The address
must already be validated and lower-cased by the caller. Empty inputs give a
zero-valued profile (absence of activity is a valid profile, not an error).
Transactions repeated within a chain (same hash) are counted once.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from airdrop_finder.eligibility.models import ChainNFT, ChainTransaction, UserActivity
from airdrop_finder.eligibility.protocols import (
    DEFAULT_PROTOCOL_TABLE,
    PROTOCOL_BRIDGE,
    PROTOCOL_DEX,
    ProtocolTable,
)
from airdrop_finder.finder_logging import get_logger, short_address

logger = get_logger(__name__)


def _norm(address: str | None) -> str:
    return (address or "").strip().lower()


def _interacted_contract(tx: ChainTransaction) -> str | None:
    """
    Contract touched by a transaction: explicit contract_address, else the
    destination of a decoded call. Plain value transfers have no contract.
    """
    contract = _norm(tx.contract_address)
    if contract:
        return contract
    if tx.decoded_function_name and _norm(tx.to_address):
        return _norm(tx.to_address)
    return None


def aggregate_activity(
    address: str,
    per_chain_transactions: Mapping[int, Sequence[ChainTransaction]] | None,
    per_chain_nfts: Mapping[int, Sequence[ChainNFT]] | None,
    protocol_table: ProtocolTable = DEFAULT_PROTOCOL_TABLE,
) -> UserActivity:
    """
    Build the canonical activity profile for one address.

    chains_used / per_chain_transaction_count only include chains with at least
    one transaction. NFTs contribute nft_contracts_held regardless of chain.
    first/last_activity_unix are min/max transaction timestamps (None without txs).
    """
    per_chain_transactions = per_chain_transactions or {}
    per_chain_nfts = per_chain_nfts or {}
    if not per_chain_transactions and not per_chain_nfts:
        return UserActivity.empty(address)

    per_chain_count: dict[int, int] = {}
    contracts: set[str] = set()
    protocols: set[str] = set()
    bridges: set[str] = set()
    dexes: set[str] = set()
    total_value = 0.0
    total_gas = 0.0
    first_ts: int | None = None
    last_ts: int | None = None
    owner = _norm(address)

    for chain_id in sorted(per_chain_transactions):
        seen_hashes: set[str] = set()
        count = 0
        for tx in per_chain_transactions[chain_id]:
            tx_hash = _norm(tx.hash)
            if tx_hash and tx_hash in seen_hashes:
                continue
            if tx_hash:
                seen_hashes.add(tx_hash)
            count += 1
            total_value += float(tx.value_usd or 0.0)
            total_gas += float(tx.gas_usd or 0.0)

            ts = int(tx.timestamp_unix)
            first_ts = ts if first_ts is None else min(first_ts, ts)
            last_ts = ts if last_ts is None else max(last_ts, ts)

            contract = _interacted_contract(tx)
            if contract and contract != owner:
                contracts.add(contract)
                protocol = protocol_table.detect(contract, tx.contract_name, tx.contract_symbol)
                if protocol:
                    protocols.add(protocol)
                    category = protocol_table.category(protocol)
                    if category == PROTOCOL_BRIDGE:
                        bridges.add(protocol)
                    elif category == PROTOCOL_DEX:
                        dexes.add(protocol)
        if count > 0:
            per_chain_count[int(chain_id)] = count

    nft_contracts = {
        _norm(nft.contract_address)
        for nfts in per_chain_nfts.values()
        for nft in nfts
        if _norm(nft.contract_address)
    }

    activity = UserActivity(
        address=address,
        chains_used=frozenset(per_chain_count),
        total_transaction_count=sum(per_chain_count.values()),
        per_chain_transaction_count=per_chain_count,
        contracts_interacted=frozenset(contracts),
        protocols_touched=frozenset(protocols),
        bridges_used=frozenset(bridges),
        dexes_used=frozenset(dexes),
        nft_contracts_held=frozenset(nft_contracts),
        total_value_usd=total_value,
        total_gas_usd=total_gas,
        first_activity_unix=first_ts,
        last_activity_unix=last_ts,
    )
    logger.debug(
        "activity_aggregated",
        address=short_address(address),
        chains=sorted(activity.chains_used),
        tx_count=activity.total_transaction_count,
        protocols=sorted(activity.protocols_touched),
        nft_contracts=len(activity.nft_contracts_held),
    )
    return activity
