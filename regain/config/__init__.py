"""Application configuration module.

- **settings.py**: Environment-based settings (Pydantic BaseSettings)
  - Database URL, LLM provider config, per-call timeout, invalidation policy
  - Loaded from .env file via pydantic-settings

- **pipeline_config.yaml**: Generation pipeline tunables
  - Phase admission tags, pruning thresholds, selection bounds
  - Loaded and validated by PipelineConfigLoader (frozen dataclasses)
"""
from regain.config.settings import InvalidationPolicy, Settings, get_settings

# Pipeline config loader (lazy import to avoid circular dependencies)
# Use: from regain.config.pipeline_config_loader import get_pipeline_config

__all__ = ["InvalidationPolicy", "Settings", "get_settings"]
