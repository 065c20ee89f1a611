"""nggraph CLI: semantic dependency graphs for TypeScript and Angular projects."""

__version__ = "0.1.0"
