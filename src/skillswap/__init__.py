"""skillswap — peer-to-peer skill exchange core."""

__version__ = "0.1.0"
