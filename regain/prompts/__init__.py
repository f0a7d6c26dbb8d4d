"""Prompt builders for the probabilistic pipeline nodes."""
