"""Regain weekly training generation service."""
