"""Adapter between the command handlers and the py-cord client."""
