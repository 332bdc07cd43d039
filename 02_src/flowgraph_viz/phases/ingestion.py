"""Flow graph ingestion phase: source file -> scopes -> multigraphs.

The steps run as a linear LangGraph workflow, the same shape as the
extraction workflow of the pipeline: each node returns a partial state update
that the next one reads.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import networkx as nx
from langgraph.graph import END, START, StateGraph
from typing_extensions import TypedDict

from ..assembler import assemble_scopes
from ..graph_model import GraphScope
from ..graph_orchestrator import build_graph
from ..pipeline import PipelinePhase

logger = logging.getLogger(__name__)


class IngestionState(TypedDict):
    source_path: str
    lines: List[str]
    scopes: List[GraphScope]
    graphs: List[nx.MultiDiGraph]


class FlowGraphIngestionPhase(PipelinePhase):
    phase_name = "ingestion"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        source_path = Path(str(context["source_path"]))
        logger.info("Processing file %s", source_path.name)

        workflow = self._build_workflow()
        result_state = workflow.invoke(
            {
                "source_path": str(source_path),
                "lines": [],
                "scopes": [],
                "graphs": [],
            }
        )
        return {
            "ingestion_output": {
                "scopes": result_state.get("scopes", []),
                "graphs": result_state.get("graphs", []),
            }
        }

    def _build_workflow(self):
        graph = StateGraph(IngestionState)
        graph.add_node("read_source", self._read_source)
        graph.add_node("assemble_scopes", self._assemble_scopes)
        graph.add_node("materialize_graphs", self._materialize_graphs)
        graph.add_edge(START, "read_source")
        graph.add_edge("read_source", "assemble_scopes")
        graph.add_edge("assemble_scopes", "materialize_graphs")
        graph.add_edge("materialize_graphs", END)
        return graph.compile()

    @staticmethod
    def _read_source(state: IngestionState) -> Dict[str, Any]:
        path = Path(state["source_path"])
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            lines = [line.rstrip("\r\n") for line in handle]
        return {"lines": lines}

    @staticmethod
    def _assemble_scopes(state: IngestionState) -> Dict[str, Any]:
        return {"scopes": assemble_scopes(state.get("lines", []))}

    @staticmethod
    def _materialize_graphs(state: IngestionState) -> Dict[str, Any]:
        return {"graphs": [build_graph(scope) for scope in state.get("scopes", [])]}
