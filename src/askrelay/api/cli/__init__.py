"""Command line interface for askrelay."""
