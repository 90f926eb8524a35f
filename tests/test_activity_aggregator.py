"""
Pytest tests for the activity aggregator: counts, dedup, contracts, protocols, NFTs, idempotence.
"""

from __future__ import annotations

import copy

UNISWAP_ROUTER = "0x68b3465833fb72a70ecdf485e0e4c7bd8665fc45"
ZORA = "0x7777777f279eba3d3ad8f4e708545291a6fdba8b"
STARGATE = "0x8731d54e9d02c286767d56ac03e8037c07e01e98"
HOP = "0x3666f603cc164936c1b87e207f36beba4ac5f18a"


def test_empty_inputs_give_zero_profile(wallet):
    """No transactions and no NFTs -> zero-valued profile, not an error."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    activity = aggregate_activity(wallet, {}, {})
    assert activity.address == wallet
    assert activity.total_transaction_count == 0
    assert activity.chains_used == frozenset()
    assert activity.per_chain_transaction_count == {}
    assert activity.total_value_usd == 0.0
    assert activity.first_activity_unix is None
    assert activity.last_activity_unix is None

    assert aggregate_activity(wallet, None, None).total_transaction_count == 0


def test_counts_per_chain_and_total(wallet, make_tx):
    """Total equals the sum of per-chain counts; chains_used lists chains with txs only."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    txs = {
        1: [make_tx(1) for _ in range(7)],
        8453: [make_tx(8453) for _ in range(5)],
        10: [],
    }
    activity = aggregate_activity(wallet, txs, {})
    assert activity.per_chain_transaction_count == {1: 7, 8453: 5}
    assert activity.total_transaction_count == 12
    assert activity.total_transaction_count == sum(activity.per_chain_transaction_count.values())
    assert activity.chains_used == frozenset({1, 8453})


def test_duplicate_hash_counted_once(wallet, make_tx):
    """The same tx hash repeated within a chain contributes once to counts and value."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    tx = make_tx(1, hash="0xdup", value_usd=100.0)
    activity = aggregate_activity(wallet, {1: [tx, tx, make_tx(1, value_usd=1.0)]}, {})
    assert activity.total_transaction_count == 2
    assert activity.total_value_usd == 101.0


def test_value_gas_and_timestamps(wallet, make_tx, now_ts):
    """Value and gas are summed; first/last activity are min/max timestamps."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    txs = {
        1: [make_tx(1, value_usd=50.0, gas_usd=2.0, timestamp_unix=now_ts - 100)],
        137: [make_tx(137, value_usd=25.5, gas_usd=0.25, timestamp_unix=now_ts - 5000)],
    }
    activity = aggregate_activity(wallet, txs, {})
    assert activity.total_value_usd == 75.5
    assert activity.total_gas_usd == 2.25
    assert activity.first_activity_unix == now_ts - 5000
    assert activity.last_activity_unix == now_ts - 100


def test_contracts_lowercased_and_self_excluded(wallet, make_tx):
    """Contract addresses are lower-cased; plain transfers and self-calls add no contract."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    mixed = "0xAbCdEf0000000000000000000000000000000001"
    txs = {
        1: [
            make_tx(1, contract_address=mixed),
            make_tx(1, to_address="0x3333333333333333333333333333333333333333"),
            make_tx(1, to_address=wallet, decoded_function_name="transfer"),
            make_tx(1, to_address="0x4444444444444444444444444444444444444444", decoded_function_name="swap"),
        ]
    }
    activity = aggregate_activity(wallet, txs, {})
    assert activity.contracts_interacted == frozenset({
        mixed.lower(),
        "0x4444444444444444444444444444444444444444",
    })


def test_protocols_from_known_contracts_and_names(wallet, make_tx):
    """Known contract addresses and name prefixes attribute protocols; others do not."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    txs = {
        1: [
            make_tx(1, contract_address=UNISWAP_ROUTER.upper().replace("0X", "0x")),
            make_tx(1, contract_address="0x5555555555555555555555555555555555555555", contract_name="Aave V3 Pool"),
            make_tx(1, contract_address="0x6666666666666666666666666666666666666666", contract_name="notaave"),
        ],
        8453: [make_tx(8453, contract_address=ZORA)],
    }
    activity = aggregate_activity(wallet, txs, {})
    assert activity.protocols_touched == frozenset({"Uniswap", "Aave", "Zora"})


def test_nfts_without_transactions(wallet, make_nft):
    """NFTs fill nft_contracts_held even when the wallet has no transactions."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    nfts = {8453: [make_nft(8453, contract_address="0xNFT0000000000000000000000000000000000001")]}
    activity = aggregate_activity(wallet, {}, nfts)
    assert activity.nft_contracts_held == frozenset({"0xnft0000000000000000000000000000000000001"})
    assert activity.total_transaction_count == 0
    assert activity.chains_used == frozenset()


def test_custom_protocol_table(wallet, make_tx):
    """A caller-supplied ProtocolTable replaces the default attribution."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity
    from airdrop_finder.eligibility.protocols import ProtocolTable

    table = ProtocolTable(contracts={"0x7000000000000000000000000000000000000007": "Scroll Bridge"})
    txs = {534352: [make_tx(534352, contract_address="0x7000000000000000000000000000000000000007")]}
    activity = aggregate_activity(wallet, txs, {}, protocol_table=table)
    assert activity.protocols_touched == frozenset({"Scroll Bridge"})


def test_to_dict_is_sorted(wallet, make_tx):
    """to_dict lists sets in sorted order with string chain keys."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    activity = aggregate_activity(wallet, {8453: [make_tx(8453)], 1: [make_tx(1)]}, {})
    d = activity.to_dict()
    assert d["chains_used"] == [1, 8453]
    assert d["per_chain_transaction_count"] == {"1": 1, "8453": 1}


def test_bridges_and_dexes_from_protocol_categories(wallet, make_tx):
    """Bridge and DEX protocols are listed separately; other categories stay in protocols_touched only."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    txs = {
        1: [
            make_tx(1, contract_address=STARGATE),
            make_tx(1, contract_address=UNISWAP_ROUTER),
            make_tx(1, contract_address="0x5555555555555555555555555555555555555555", contract_name="Aave V3 Pool"),
        ],
        10: [
            make_tx(10, contract_address=HOP),
            make_tx(10, contract_address="0x8888888888888888888888888888888888888888", contract_symbol="SUSHI-LP"),
        ],
        8453: [make_tx(8453, contract_address=ZORA)],
    }
    activity = aggregate_activity(wallet, txs, {})
    assert activity.protocols_touched == frozenset({"Stargate", "Uniswap", "Aave", "Hop", "SushiSwap", "Zora"})
    assert activity.bridges_used == frozenset({"Stargate", "Hop"})
    assert activity.dexes_used == frozenset({"Uniswap", "SushiSwap"})

    d = activity.to_dict()
    assert d["bridges_used"] == ["Hop", "Stargate"]
    assert d["dexes_used"] == ["SushiSwap", "Uniswap"]


def test_uncategorized_protocol_is_neither_bridge_nor_dex(wallet, make_tx):
    """A protocol added without a category is attributed but not classified."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity
    from airdrop_finder.eligibility.protocols import DEFAULT_PROTOCOL_TABLE, PROTOCOL_BRIDGE

    scroll_bridge = "0x7000000000000000000000000000000000000007"
    table = DEFAULT_PROTOCOL_TABLE.with_contracts({scroll_bridge: "Scroll Bridge"})
    txs = {534352: [make_tx(534352, contract_address=scroll_bridge)]}

    activity = aggregate_activity(wallet, txs, {}, protocol_table=table)
    assert activity.protocols_touched == frozenset({"Scroll Bridge"})
    assert activity.bridges_used == frozenset()

    categorized = table.with_categories({"Scroll Bridge": PROTOCOL_BRIDGE})
    activity = aggregate_activity(wallet, txs, {}, protocol_table=categorized)
    assert activity.bridges_used == frozenset({"Scroll Bridge"})
    assert DEFAULT_PROTOCOL_TABLE.category("Scroll Bridge") is None


def test_aggregation_is_idempotent(wallet, make_tx, make_nft, now_ts):
    """Same inputs give an equal profile on every call, and the input mappings are left untouched."""
    from airdrop_finder.eligibility.activity_aggregator import aggregate_activity

    dup = make_tx(1, hash="0xdup", value_usd=40.0)
    txs = {
        1: [
            dup,
            dup,
            make_tx(1, contract_address=UNISWAP_ROUTER, timestamp_unix=now_ts - 500),
            make_tx(1, to_address="0x4444444444444444444444444444444444444444", decoded_function_name="swap"),
        ],
        42161: [make_tx(42161, contract_address=STARGATE, gas_usd=1.25)],
        10: [],
    }
    nfts = {
        8453: [make_nft(8453, contract_address=ZORA), make_nft(8453, contract_address=ZORA.upper().replace("0X", "0x"))],
        1: [make_nft(1)],
    }
    txs_before = copy.deepcopy(txs)
    nfts_before = copy.deepcopy(nfts)

    first = aggregate_activity(wallet, txs, nfts)
    second = aggregate_activity(wallet, txs, nfts)

    assert first == second
    assert first.to_dict() == second.to_dict()
    assert first.total_transaction_count == 4
    assert first.protocols_touched == frozenset({"Uniswap", "Stargate"})
    assert len(first.nft_contracts_held) == 2
    assert txs == txs_before
    assert nfts == nfts_before
