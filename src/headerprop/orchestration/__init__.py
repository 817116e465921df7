"""Propagation orchestration."""
