"""API layer: entry points into askrelay."""
