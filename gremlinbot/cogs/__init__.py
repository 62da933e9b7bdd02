"""Bot extensions (cogs)."""
