"""
Score one wallet against a project set from a JSON fixture and print the report.

How to run:
    From project root:
        python -m airdrop_finder.tools.score_wallet fixture.json
        python -m airdrop_finder.tools.score_wallet fixture.json --mode eligibility --now 1767225600

Fixture shape:
    {
      "address": "0xabc...",
      "now_unix": 1767225600,                      (optional; default: wall clock)
      "projects": [{"project_id": "zora", "name": "Zora", "status": "confirmed",
                    "criteria": [{"type": "min_transaction_count", "min_count": 10}]}],
      "transactions": {"1": [{"hash": "0x..", "from_address": "0x..", "to_address": "0x..",
                              "value_usd": 10.0, "gas_usd": 0.5, "timestamp_unix": 1700000000}]},
      "nfts": {"8453": [{"contract_address": "0x..", "token_id": "1", "acquired_at_unix": 1700000000}]},
      "unavailable_chains": []
    }

Output: report JSON on stdout (logs go to stderr).
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Mapping

from airdrop_finder.cache import ResultCache
from airdrop_finder.core.exceptions import AirdropFinderError
from airdrop_finder.eligibility.models import ChainNFT, ChainTransaction
from airdrop_finder.eligibility.pipeline import EligibilityPipeline
from airdrop_finder.eligibility.projects import InMemoryProjectRepository
from airdrop_finder.eligibility.recommendations import summarize_recommendations
from airdrop_finder.finder_logging import get_logger
from airdrop_finder.ingestion.collector import CollectedChainData, StaticCollector

logger = get_logger(__name__)

MODES = ("opportunities", "eligibility", "recommendations")


def _tx_from_dict(chain_id: int, d: Mapping[str, Any]) -> ChainTransaction:
    return ChainTransaction(
        chain_id=chain_id,
        hash=str(d.get("hash") or ""),
        from_address=str(d.get("from_address") or ""),
        to_address=d.get("to_address"),
        value_usd=float(d.get("value_usd") or 0.0),
        gas_usd=float(d.get("gas_usd") or 0.0),
        timestamp_unix=int(d.get("timestamp_unix") or 0),
        contract_address=d.get("contract_address"),
        decoded_function_name=d.get("decoded_function_name"),
        contract_name=d.get("contract_name"),
        contract_symbol=d.get("contract_symbol"),
    )


def _nft_from_dict(chain_id: int, d: Mapping[str, Any]) -> ChainNFT:
    return ChainNFT(
        chain_id=chain_id,
        contract_address=str(d.get("contract_address") or ""),
        token_id=str(d.get("token_id") or ""),
        acquired_at_unix=int(d.get("acquired_at_unix") or 0),
    )


def chain_data_from_fixture(fixture: Mapping[str, Any]) -> CollectedChainData:
    """Build collected chain data from the fixture's transactions/nfts maps (keys are chain ids)."""
    txs = {
        int(chain): [_tx_from_dict(int(chain), t) for t in items]
        for chain, items in (fixture.get("transactions") or {}).items()
    }
    nfts = {
        int(chain): [_nft_from_dict(int(chain), n) for n in items]
        for chain, items in (fixture.get("nfts") or {}).items()
    }
    unavailable = tuple(sorted(int(c) for c in fixture.get("unavailable_chains") or ()))
    return CollectedChainData(transactions=txs, nfts=nfts, unavailable_chains=unavailable)


def run(fixture: Mapping[str, Any], mode: str = "opportunities", now_unix: int | None = None) -> dict[str, Any]:
    address = str(fixture.get("address") or "")
    if not address:
        raise ValueError("fixture has no 'address'")
    now = now_unix if now_unix is not None else fixture.get("now_unix")
    clock = (lambda: float(now)) if now is not None else time.time

    pipeline = EligibilityPipeline(
        InMemoryProjectRepository.from_dicts(fixture.get("projects") or []),
        StaticCollector(chain_data_from_fixture(fixture)),
        ResultCache(clock=clock),
        clock=clock,
    )
    if mode == "eligibility":
        return pipeline.check_eligibility(address).to_dict()
    if mode == "recommendations":
        recs = pipeline.recommend(address)
        return {
            "address": address.lower(),
            "recommendations": [r.to_dict() for r in recs],
            "summary": summarize_recommendations(recs),
        }
    return pipeline.find_opportunities(address).to_dict()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Score a wallet against airdrop projects from a JSON fixture",
    )
    parser.add_argument("fixture", type=Path, help="Path to fixture JSON (address, projects, chain data)")
    parser.add_argument("--mode", choices=MODES, default="opportunities", help="Report to print (default: opportunities)")
    parser.add_argument("--now", type=int, default=None, help="Override current unix time (default: fixture now_unix or wall clock)")
    args = parser.parse_args(argv)

    try:
        fixture = json.loads(args.fixture.read_text(encoding="utf-8"))
        report = run(fixture, mode=args.mode, now_unix=args.now)
    except (OSError, ValueError, AirdropFinderError) as e:
        logger.error("score_wallet_failed", fixture=str(args.fixture), error=str(e))
        print("ERROR:", e, file=sys.stderr)
        return 1
    print(json.dumps(report, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
