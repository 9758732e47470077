# src/incremental/__init__.py

from .context import MarkerFileBuildContext, NonIncrementalBuildContext

__all__ = ["MarkerFileBuildContext", "NonIncrementalBuildContext"]
