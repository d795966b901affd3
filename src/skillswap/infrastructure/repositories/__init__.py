"""Read-side repositories over the skillswap tables."""
