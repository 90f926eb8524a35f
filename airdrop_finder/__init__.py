"""
Airdrop Finder: eligibility scoring engine for multi-chain wallets.

Folds per-chain activity into a wallet profile, evaluates project criteria
against it, scores and ranks airdrop opportunities. Modular layout with
separate ingestion fan-out, eligibility engine, and result cache.
"""

__version__ = "0.1.0"
