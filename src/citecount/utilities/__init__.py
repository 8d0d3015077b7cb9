"""Shared schemas and helpers for citecount."""
