"""Logging and process lifecycle helpers."""
