from .driver import discover_sources, render_outputs, run_pipeline
from .workspace import OutputWorkspace, WorkspaceError

__all__ = [
    "discover_sources",
    "render_outputs",
    "run_pipeline",
    "OutputWorkspace",
    "WorkspaceError",
]
