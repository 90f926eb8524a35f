"""
Protocol detection lookup table.

Best-effort attribution of contracts to named protocols. Two sources:
known contract addresses (exact, lower-cased) and (prefix, protocol) pairs
matched against a contract's name or symbol. Name matching is exact or
prefix only; no substring or fuzzy matching, so "aave" never matches "notaave".
False negatives are expected; unmatched contracts are simply not attributed.
Detected protocols carry a category (nft, bridge, defi, dex) used to derive
the bridges and DEXes a wallet has used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

# Known protocol contracts (mainnet, lower-cased)
KNOWN_PROTOCOL_CONTRACTS: dict[str, str] = {
    "0x7777777f279eba3d3ad8f4e708545291a6fdba8b": "Zora",
    "0x8731d54e9d02c286767d56ac03e8037c07e01e98": "Stargate",
    "0x66a71dcef29a0ffbdbe3c6a460a3b5bc225cd675": "LayerZero",
    "0x858646372cc42e1a627fce94aa7a7033e7cf075a": "EigenLayer",
    "0x68b3465833fb72a70ecdf485e0e4c7bd8665fc45": "Uniswap",
    "0xe592427a0aece92de3edee1f18e0157c05861564": "Uniswap",
    "0xd9e1ce17f2641f24ae83637ab66a2cca9c378b9f": "SushiSwap",
    "0x3666f603cc164936c1b87e207f36beba4ac5f18a": "Hop",
    "0x4d9079bb4165aeb4084c526a32695dcfd2f77381": "Across",
}

# (name/symbol prefix, protocol). Longer prefixes win when several match.
PROTOCOL_NAME_PREFIXES: tuple[tuple[str, str], ...] = (
    ("uniswap", "Uniswap"),
    ("uni-v3", "Uniswap"),
    ("aave", "Aave"),
    ("sushiswap", "SushiSwap"),
    ("sushi", "SushiSwap"),
    ("curve", "Curve"),
    ("compound", "Compound"),
    ("stargate", "Stargate"),
    ("layerzero", "LayerZero"),
    ("eigenlayer", "EigenLayer"),
    ("zora", "Zora"),
    ("hop", "Hop"),
    ("across", "Across"),
    ("balancer", "Balancer"),
    ("lido", "Lido"),
    ("aerodrome", "Aerodrome"),
    ("syncswap", "SyncSwap"),
)


PROTOCOL_NFT = "nft"
PROTOCOL_BRIDGE = "bridge"
PROTOCOL_DEFI = "defi"
PROTOCOL_DEX = "dex"

# protocol -> category
PROTOCOL_CATEGORIES: dict[str, str] = {
    "Zora": PROTOCOL_NFT,
    "Stargate": PROTOCOL_BRIDGE,
    "LayerZero": PROTOCOL_BRIDGE,
    "Hop": PROTOCOL_BRIDGE,
    "Across": PROTOCOL_BRIDGE,
    "EigenLayer": PROTOCOL_DEFI,
    "Aave": PROTOCOL_DEFI,
    "Compound": PROTOCOL_DEFI,
    "Lido": PROTOCOL_DEFI,
    "Uniswap": PROTOCOL_DEX,
    "SushiSwap": PROTOCOL_DEX,
    "Curve": PROTOCOL_DEX,
    "Balancer": PROTOCOL_DEX,
    "Aerodrome": PROTOCOL_DEX,
    "SyncSwap": PROTOCOL_DEX,
}


@dataclass(frozen=True)
class ProtocolTable:
    """
    Pluggable protocol lookup. Extend with with_contracts(), with_prefixes()
    or with_categories();
    instances are immutable and safe to share across requests.
    """

    contracts: dict[str, str] = field(default_factory=dict)
    name_prefixes: tuple[tuple[str, str], ...] = ()
    categories: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        contracts = {addr.strip().lower(): name for addr, name in self.contracts.items()}
        prefixes = tuple(
            sorted(
                ((p.strip().lower(), name) for p, name in self.name_prefixes if p.strip()),
                key=lambda pair: (-len(pair[0]), pair[0]),
            )
        )
        object.__setattr__(self, "contracts", contracts)
        object.__setattr__(self, "name_prefixes", prefixes)
        object.__setattr__(self, "categories", dict(self.categories))

    def match_contract(self, address: str | None) -> str | None:
        """Exact match on a known contract address (case-insensitive)."""
        if not address:
            return None
        return self.contracts.get(address.strip().lower())

    def match_name(self, name_or_symbol: str | None) -> str | None:
        """Exact or prefix match of a contract name/symbol against the prefix table."""
        if not name_or_symbol:
            return None
        value = name_or_symbol.strip().lower()
        if not value:
            return None
        for prefix, protocol in self.name_prefixes:
            if value == prefix or value.startswith(prefix):
                return protocol
        return None

    def detect(
        self,
        address: str | None,
        name: str | None = None,
        symbol: str | None = None,
    ) -> str | None:
        """Known address first, then name, then symbol. None when nothing matches."""
        return self.match_contract(address) or self.match_name(name) or self.match_name(symbol)

    def category(self, protocol: str | None) -> str | None:
        """nft, bridge, defi or dex for a detected protocol; None when unclassified."""
        if not protocol:
            return None
        return self.categories.get(protocol)

    def with_contracts(self, contracts: dict[str, str]) -> ProtocolTable:
        merged = dict(self.contracts)
        merged.update(contracts)
        return ProtocolTable(
            contracts=merged,
            name_prefixes=self.name_prefixes,
            categories=self.categories,
        )

    def with_prefixes(self, prefixes: Iterable[tuple[str, str]]) -> ProtocolTable:
        return ProtocolTable(
            contracts=self.contracts,
            name_prefixes=tuple(self.name_prefixes) + tuple(prefixes),
            categories=self.categories,
        )

    def with_categories(self, categories: dict[str, str]) -> ProtocolTable:
        merged = dict(self.categories)
        merged.update(categories)
        return ProtocolTable(
            contracts=self.contracts,
            name_prefixes=self.name_prefixes,
            categories=merged,
        )


DEFAULT_PROTOCOL_TABLE = ProtocolTable(
    contracts=KNOWN_PROTOCOL_CONTRACTS,
    name_prefixes=PROTOCOL_NAME_PREFIXES,
    categories=PROTOCOL_CATEGORIES,
)
