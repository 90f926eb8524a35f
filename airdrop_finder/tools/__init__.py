"""Command-line tools for Airdrop Finder."""
