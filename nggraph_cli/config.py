"""Configuration paths and analysis defaults for nggraph."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("NGGRAPH_HOME", str(Path.home() / ".nggraph"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

SUPPORTED_EXTENSIONS = (".ts", ".tsx")
SKIP_DIRS = (
    "node_modules", ".git", ".angular", "dist", "build", "coverage",
    "out-tsc", ".cache", ".nx", "tmp",
)
EXCLUDE_PATTERNS = ("*.d.ts",)
DEFAULT_EXPORT_FORMAT = "json"
