"""
Logging helpers shared by every airdrop_finder module.
"""

from airdrop_finder.finder_logging.logger import bind_address, get_logger, short_address

__all__ = ["get_logger", "bind_address", "short_address"]
