"""Observability helpers for unitwatch."""
