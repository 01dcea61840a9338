"""Localized response envelopes for FastAPI services."""
