"""Rendering phase: hands every exported DOT file to Graphviz."""

from typing import Any, Dict, List

from ..config import FlowGraphConfig
from ..pipeline import PipelinePhase
from ..render import RenderResult, render_dot


class RenderPhase(PipelinePhase):
    phase_name = "rendering"

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        if not self._enabled:
            return {"render_output": []}

        config: FlowGraphConfig = context["config"]
        results: List[RenderResult] = []
        for item in context.get("export_output", []):
            dot_path = item["dot_path"]
            image_path = dot_path.with_suffix(f".{config.render_format}")
            results.append(
                render_dot(
                    dot_path,
                    image_path,
                    executable=config.dot_executable,
                    engine=config.layout_engine,
                    image_format=config.render_format,
                    timeout=config.render_timeout,
                )
            )
        return {"render_output": results}
