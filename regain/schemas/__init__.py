"""Pydantic schemas for the generation pipeline and API."""
