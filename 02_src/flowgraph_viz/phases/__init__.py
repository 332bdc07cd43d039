"""Pipeline phases for flow graph conversion."""

from .export import DotExportPhase
from .ingestion import FlowGraphIngestionPhase
from .rendering import RenderPhase
from .validation import ValidationAndQAPhase

__all__ = [
    "FlowGraphIngestionPhase",
    "DotExportPhase",
    "RenderPhase",
    "ValidationAndQAPhase",
]
