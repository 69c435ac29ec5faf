"""Adapters for the chat service and the local filesystem."""
