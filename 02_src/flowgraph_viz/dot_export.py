"""Graphviz DOT serialization of materialized flow graphs."""

import logging
from pathlib import Path
from typing import List, Optional

import networkx as nx

from .graph_model import FlowGraphEdge, FlowGraphNode, GraphScope
from .labels import LabelResolver

logger = logging.getLogger(__name__)

Y_SCALE = 0.75


def escape_dot(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_position(node: FlowGraphNode, y_scale: float = Y_SCALE) -> str:
    # Trailing `!` pins the node for neato -n.
    return f"{node.x:f}, {node.y * y_scale:f}!"


def serialize_graph(graph: nx.MultiDiGraph, resolver: LabelResolver, y_scale: float = Y_SCALE) -> str:
    lines: List[str] = ["digraph G {"]
    for node_id, data in graph.nodes(data=True):
        node: FlowGraphNode = data["node"]
        label = escape_dot(resolver.resolve(node))
        position = format_position(node, y_scale)
        lines.append(f'  "{escape_dot(node_id)}" [ label="{label}" pos="{position}" ];')
    for source, target, data in graph.edges(data=True):
        edge: FlowGraphEdge = data["edge"]
        lines.append(
            f'  "{escape_dot(source)}" -> "{escape_dot(target)}" [ label="{escape_dot(edge.label)}" ];'
        )
    lines.append("}")
    return "\n".join(lines) + "\n"


def output_stem(source_path: Path, scope: GraphScope) -> str:
    if scope.trailing or not scope.entity_name:
        return source_path.stem
    return f"{source_path.stem}_{scope.entity_name}"


def write_dot(text: str, output_dir: Path, stem: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    dot_path = output_dir / f"{stem}.dot"
    logger.info("Writing %s", dot_path)
    dot_path.write_text(text, encoding="utf-8")
    return dot_path


def report_unhandled_classes(resolver: LabelResolver) -> Optional[str]:
    classes = resolver.unhandled_classes
    if not classes:
        return None
    report = "Classes that didn't have special parsers:\n" + "\n".join(classes)
    logger.info(report)
    return report
