"""Sync core: domain, contracts and services (no I/O)."""
