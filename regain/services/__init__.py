"""Weekly generation pipeline services."""
