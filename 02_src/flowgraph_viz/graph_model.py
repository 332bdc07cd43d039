"""Flow graph data model primitives."""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class FlowGraphNode:
    id: str
    name: Optional[str]
    node_class: Optional[str]
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    inputs: Mapping[str, str] = field(default_factory=dict)

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @property
    def z(self) -> float:
        return self.position[2]


@dataclass(frozen=True)
class FlowGraphEdge:
    node_out: Optional[str]
    node_in: Optional[str]
    port_in: Optional[str]
    port_out: Optional[str]

    @property
    def label(self) -> str:
        return f"{self.port_out},{self.port_in}"


@dataclass
class GraphScope:
    """One flow graph recovered from a source file."""

    entity_name: Optional[str]
    nodes: Dict[str, FlowGraphNode] = field(default_factory=dict)
    edges: List[FlowGraphEdge] = field(default_factory=list)
    trailing: bool = False

    def dangling_edges(self) -> List[FlowGraphEdge]:
        return [
            edge
            for edge in self.edges
            if edge.node_out not in self.nodes or edge.node_in not in self.nodes
        ]
