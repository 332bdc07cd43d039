"""DOT export phase: one interchange file per graph scope."""

import logging
from pathlib import Path
from typing import Any, Dict, List

from ..config import FlowGraphConfig
from ..dot_export import output_stem, report_unhandled_classes, serialize_graph, write_dot
from ..labels import LabelResolver
from ..pipeline import PipelinePhase

logger = logging.getLogger(__name__)


class DotExportPhase(PipelinePhase):
    phase_name = "export"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        config: FlowGraphConfig = context["config"]
        resolver: LabelResolver = context["resolver"]
        source_path = Path(str(context["source_path"]))
        ingestion_output = context.get("ingestion_output", {})
        output_dir = config.resolved_output_dir

        exported: List[Dict[str, Any]] = []
        for scope, graph in zip(ingestion_output.get("scopes", []), ingestion_output.get("graphs", [])):
            stem = output_stem(source_path, scope)
            text = serialize_graph(graph, resolver, y_scale=config.y_scale)
            dot_path = write_dot(text, output_dir, stem)
            exported.append(
                {
                    "stem": stem,
                    "entity_name": scope.entity_name,
                    "dot_path": dot_path,
                    "node_count": graph.number_of_nodes(),
                    "edge_count": graph.number_of_edges(),
                    "declared_edge_count": len(scope.edges),
                    "dangling_edge_count": graph.graph.get("dangling_edges", 0),
                }
            )

        report_unhandled_classes(resolver)
        return {"export_output": exported}
