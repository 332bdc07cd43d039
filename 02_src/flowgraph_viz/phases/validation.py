"""Validation and QA phase: per-file counts and data-quality warnings."""

from typing import Any, Dict, List

from ..pipeline import PipelinePhase


class ValidationAndQAPhase(PipelinePhase):
    phase_name = "validation"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        exported = context.get("export_output", [])
        rendered = context.get("render_output", [])
        warnings: List[str] = []

        for item in exported:
            if item["dangling_edge_count"]:
                warnings.append(
                    f"{item['stem']}: {item['dangling_edge_count']} of "
                    f"{item['declared_edge_count']} edges reference undeclared nodes"
                )
        render_failures = [result for result in rendered if not result.ok]
        for result in render_failures:
            warnings.append(f"{result.dot_path.name}: render failed ({result.detail})")

        qa_report = {
            "scope_count": len(exported),
            "node_count": sum(item["node_count"] for item in exported),
            "edge_count": sum(item["edge_count"] for item in exported),
            "dangling_edge_count": sum(item["dangling_edge_count"] for item in exported),
            "render_failure_count": len(render_failures),
            "warnings": warnings,
        }
        return {"validation_report": qa_report}
