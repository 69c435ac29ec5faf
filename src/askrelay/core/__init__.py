"""Core layer: domain, interfaces and utilities."""
