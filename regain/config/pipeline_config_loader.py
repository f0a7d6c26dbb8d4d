"""
Pipeline Configuration Loader

Type-safe loader for the weekly generation pipeline tunables: structural phase
admission, pruning thresholds and per-phase selection bounds.

Configuration is loaded from pipeline_config.yaml and validated on construction.
Supports explicit reloading for production updates without restart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from threading import RLock
from typing import Any

import yaml

from regain.schemas.variation import Phase


class PipelineConfigLoadError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}


class PipelineConfigValidationError(PipelineConfigLoadError):
    """Raised when configuration fails validation."""


@dataclass(frozen=True)
class SelectionBounds:
    """How many variations a phase selector must choose."""

    min_items: int
    max_items: int
    min_disciplines: int = 1

    def __post_init__(self):
        if not 0 < self.min_items <= self.max_items:
            raise PipelineConfigValidationError(
                f"min_items ({self.min_items}) must be > 0 and <= max_items ({self.max_items})"
            )
        if self.min_disciplines < 1:
            raise PipelineConfigValidationError(
                f"min_disciplines ({self.min_disciplines}) must be >= 1"
            )

    def contains(self, count: int) -> bool:
        return self.min_items <= count <= self.max_items


@dataclass(frozen=True)
class PhaseConfig:
    """Admission, pruning and selection settings for one session phase."""

    phase: Phase
    selection: SelectionBounds
    admitted_tags: frozenset[str] = field(default_factory=frozenset)
    use_session_tags: bool = False
    min_score: int = 1
    max_candidates: int = 15
    min_keep: int = 5

    def __post_init__(self):
        if not self.admitted_tags and not self.use_session_tags:
            raise PipelineConfigValidationError(
                f"Phase '{self.phase.value}' admits nothing: set admitted_tags or use_session_tags"
            )
        if self.min_score < 0:
            raise PipelineConfigValidationError(
                f"min_score ({self.min_score}) must be >= 0"
            )
        if self.max_candidates < self.selection.max_items:
            raise PipelineConfigValidationError(
                f"max_candidates ({self.max_candidates}) for '{self.phase.value}' must be "
                f">= selection.max_items ({self.selection.max_items})"
            )
        if self.min_keep < 0:
            raise PipelineConfigValidationError(f"min_keep ({self.min_keep}) must be >= 0")

    def admitted_for(self, session_tags: frozenset[str]) -> frozenset[str]:
        """Tags that make a variation eligible for this phase today."""
        if self.use_session_tags:
            return self.admitted_tags | session_tags
        return self.admitted_tags


@dataclass(frozen=True)
class OrchestratorConfig:
    """Bounds on the tag set chosen for a training day."""

    min_tags: int = 3
    max_tags: int = 8

    def __post_init__(self):
        if not 0 < self.min_tags <= self.max_tags:
            raise PipelineConfigValidationError(
                f"min_tags ({self.min_tags}) must be > 0 and <= max_tags ({self.max_tags})"
            )


@dataclass(frozen=True)
class PipelineConfig:
    """Complete pipeline configuration."""

    phases: dict[Phase, PhaseConfig]
    orchestrator: OrchestratorConfig = field(default_factory=OrchestratorConfig)
    version: str = "1.0.0"
    last_updated: str = ""

    def __post_init__(self):
        missing = [p.value for p in Phase if p not in self.phases]
        if missing:
            raise PipelineConfigValidationError(
                f"Missing phase configuration: {', '.join(missing)}"
            )

    def phase(self, phase: Phase) -> PhaseConfig:
        return self.phases[phase]


def parse_pipeline_config(data: dict[str, Any]) -> PipelineConfig:
    """Parse raw YAML data into PipelineConfig.

    Raises:
        PipelineConfigValidationError: If validation fails.
    """
    phases_data = data.get("phases", {})
    phases: dict[Phase, PhaseConfig] = {}
    for name, phase_data in phases_data.items():
        try:
            phase = Phase(name)
        except ValueError:
            raise PipelineConfigValidationError(f"Unknown phase '{name}'")
        selection = SelectionBounds(**phase_data.get("selection", {}))
        phases[phase] = PhaseConfig(
            phase=phase,
            selection=selection,
            admitted_tags=frozenset(
                t.strip().lower() for t in phase_data.get("admitted_tags", [])
            ),
            use_session_tags=phase_data.get("use_session_tags", False),
            min_score=phase_data.get("min_score", 1),
            max_candidates=phase_data.get("max_candidates", 15),
            min_keep=phase_data.get("min_keep", 5),
        )

    orchestrator = OrchestratorConfig(**data.get("orchestrator", {}))

    return PipelineConfig(
        phases=phases,
        orchestrator=orchestrator,
        version=str(data.get("version", "1.0.0")),
        last_updated=str(data.get("last_updated", "")),
    )


class PipelineConfigLoader:
    """Loader for the pipeline configuration with reload support."""

    def __init__(self, config_path: Path | None = None):
        self._lock = RLock()
        self._config: PipelineConfig | None = None
        self._config_path = config_path or self._default_config_path()
        self._reload_count = 0

        self._load_config()

    @staticmethod
    def _default_config_path() -> Path:
        """Get default configuration file path."""
        return Path(__file__).parent / "pipeline_config.yaml"

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            with open(self._config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise PipelineConfigLoadError(
                f"Configuration file not found: {self._config_path}"
            )
        except yaml.YAMLError as e:
            raise PipelineConfigLoadError(
                f"Failed to parse YAML configuration: {e}",
                details={"file_path": str(self._config_path)},
            )

        try:
            self._config = parse_pipeline_config(data)
            self._reload_count += 1
        except PipelineConfigValidationError:
            raise
        except (TypeError, AttributeError) as e:
            raise PipelineConfigLoadError(
                f"Failed to parse configuration: {e}",
                details={"file_path": str(self._config_path)},
            )

    @property
    def config(self) -> PipelineConfig:
        """Get current configuration (thread-safe)."""
        with self._lock:
            if self._config is None:
                self._load_config()
            return self._config

    def reload(self) -> None:
        """Force reload configuration from file."""
        with self._lock:
            self._load_config()

    @property
    def reload_count(self) -> int:
        return self._reload_count


_loader_instance: PipelineConfigLoader | None = None


def get_pipeline_config_loader(config_path: Path | None = None) -> PipelineConfigLoader:
    """Get or create the singleton PipelineConfigLoader instance.

    Example:
        >>> loader = get_pipeline_config_loader()
        >>> bounds = loader.config.phase(Phase.WORKOUT).selection
    """
    global _loader_instance
    if _loader_instance is None:
        if config_path is None:
            from regain.config.settings import get_settings

            custom_path = get_settings().pipeline_config_path
            config_path = Path(custom_path) if custom_path else None
        _loader_instance = PipelineConfigLoader(config_path)
    return _loader_instance


def get_pipeline_config() -> PipelineConfig:
    """Get current pipeline configuration."""
    return get_pipeline_config_loader().config


def reload_pipeline_config() -> None:
    """Force reload pipeline configuration from file."""
    get_pipeline_config_loader().reload()
