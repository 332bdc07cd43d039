"""Scope bookkeeping and graph materialization for flow graph files."""

import logging
from typing import List, Optional

import networkx as nx

from .graph_model import FlowGraphEdge, FlowGraphNode, GraphScope

logger = logging.getLogger(__name__)


class ScopeOrchestrator:
    """Owns the scope being accumulated while a file is scanned.

    The entity name is never cleared: a scope closed without a fresh
    `<Entity>` declaration reuses the name of the previous one.
    """

    def __init__(self) -> None:
        self.entity_name: Optional[str] = None
        self.scopes: List[GraphScope] = []
        self._current = GraphScope(entity_name=None)

    @property
    def current(self) -> GraphScope:
        return self._current

    def enter_entity(self, name: Optional[str]) -> None:
        self.entity_name = name

    def add_node(self, node: FlowGraphNode) -> None:
        if node.id in self._current.nodes:
            logger.debug("Node %s redeclared, keeping latest declaration", node.id)
        self._current.nodes[node.id] = node

    def add_edge(self, edge: FlowGraphEdge) -> None:
        self._current.edges.append(edge)

    def close_scope(self) -> Optional[GraphScope]:
        """Finish the current scope if an entity name is known."""
        if not self.entity_name:
            return None
        scope = self._current
        scope.entity_name = self.entity_name
        self.scopes.append(scope)
        self._current = GraphScope(entity_name=None)
        return scope

    def finish(self) -> List[GraphScope]:
        trailing = self._current
        trailing.entity_name = self.entity_name
        trailing.trailing = True
        self.scopes.append(trailing)
        self._current = GraphScope(entity_name=None)
        return list(self.scopes)


def build_graph(scope: GraphScope) -> nx.MultiDiGraph:
    """Materialize a scope as a directed multigraph.

    Edges run from `nodeout` to `nodein`. Edges whose endpoints are not
    declared in the scope are left out of the adjacency.
    """
    graph = nx.MultiDiGraph(entity_name=scope.entity_name, trailing=scope.trailing)
    for node_id, node in scope.nodes.items():
        graph.add_node(node_id, node=node)

    dangling = 0
    for edge in scope.edges:
        if edge.node_out not in scope.nodes or edge.node_in not in scope.nodes:
            dangling += 1
            logger.warning(
                "Dangling edge %s -> %s (%s) in scope %s",
                edge.node_out,
                edge.node_in,
                edge.label,
                scope.entity_name or "<trailing>",
            )
            continue
        graph.add_edge(edge.node_out, edge.node_in, edge=edge)

    graph.graph["dangling_edges"] = dangling
    return graph
