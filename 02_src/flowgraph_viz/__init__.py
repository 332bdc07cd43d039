"""Flow graph to Graphviz conversion with readable node labels."""

from .attributes import extract_attributes, extract_tag, signed_to_unsigned
from .config import FlowGraphConfig
from .graph_model import FlowGraphEdge, FlowGraphNode, GraphScope
from .graph_orchestrator import ScopeOrchestrator, build_graph
from .labels import LabelResolver, resolve_label
from .lookup_tables import LookupTables, load_lookup_tables
from .pipeline import PipelinePhase, PipelineRunner

__all__ = [
    "extract_attributes",
    "extract_tag",
    "signed_to_unsigned",
    "FlowGraphConfig",
    "FlowGraphNode",
    "FlowGraphEdge",
    "GraphScope",
    "ScopeOrchestrator",
    "build_graph",
    "LabelResolver",
    "resolve_label",
    "LookupTables",
    "load_lookup_tables",
    "PipelinePhase",
    "PipelineRunner",
]
