"""TOML-backed configuration for nggraph."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

from . import config

logger = logging.getLogger(__name__)


@dataclass
class AnalysisSettings:
    extensions: List[str] = field(default_factory=lambda: list(config.SUPPORTED_EXTENSIONS))
    skip_dirs: List[str] = field(default_factory=lambda: list(config.SKIP_DIRS))
    exclude: List[str] = field(default_factory=lambda: list(config.EXCLUDE_PATTERNS))
    export_format: str = config.DEFAULT_EXPORT_FORMAT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _config_file(path: Optional[Path] = None) -> Path:
    return path or config.CONFIG_FILE


def load_full_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the entire TOML config (all sections); empty when absent."""
    config_file = _config_file(path)
    if not config_file.exists():
        return {}
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_file, exc)
        return {}


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the ``[analysis]`` section merged over the defaults."""
    merged = AnalysisSettings().to_dict()
    section = load_full_config(path).get("analysis", {})
    for key, value in section.items():
        if key not in merged:
            logger.warning("Unknown config key 'analysis.%s' ignored", key)
            continue
        merged[key] = value
    return merged


def load_settings(path: Optional[Path] = None) -> AnalysisSettings:
    data = load_config(path)
    return AnalysisSettings(
        extensions=[str(e) for e in data["extensions"]],
        skip_dirs=[str(d) for d in data["skip_dirs"]],
        exclude=[str(p) for p in data["exclude"]],
        export_format=str(data["export_format"]),
    )


def save_config(settings: AnalysisSettings, path: Optional[Path] = None) -> Path:
    """Write *settings* to the ``[analysis]`` section, preserving other sections."""
    config_file = _config_file(path)
    full = load_full_config(config_file)
    full["analysis"] = settings.to_dict()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w", encoding="utf-8") as f:
        toml.dump(full, f)
    return config_file
