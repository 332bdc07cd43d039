"""Line scanner that turns a flow graph source file into graph scopes."""

import logging
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple

from .attributes import extract_attributes
from .graph_model import FlowGraphEdge, FlowGraphNode, GraphScope
from .graph_orchestrator import ScopeOrchestrator

logger = logging.getLogger(__name__)

ENTITY_MARKER = "<Entity"
NODE_MARKER = "<Node "
INPUTS_MARKER = "<Inputs "
EDGE_MARKER = "<Edge "
SCOPE_CLOSE_MARKER = "</FlowGraph>"

ORIGIN = (0.0, 0.0, 0.0)


def parse_position(raw: Optional[str]) -> Tuple[float, float, float]:
    if not raw:
        return ORIGIN
    parts = raw.split(",")
    try:
        coords = [float(part) for part in parts[:3]]
    except ValueError:
        logger.debug("Unparseable position %r, using origin", raw)
        return ORIGIN
    coords.extend([0.0] * (3 - len(coords)))
    return coords[0], coords[1], coords[2]


def parse_node(keys: Mapping[str, str], inputs: Mapping[str, str]) -> FlowGraphNode:
    return FlowGraphNode(
        id=keys.get("id"),
        name=keys.get("name"),
        node_class=keys.get("class"),
        position=parse_position(keys.get("pos")),
        inputs=dict(inputs),
    )


def parse_edge(keys: Mapping[str, str]) -> FlowGraphEdge:
    return FlowGraphEdge(
        node_out=keys.get("nodeout"),
        node_in=keys.get("nodein"),
        port_in=keys.get("portin"),
        port_out=keys.get("portout"),
    )


def assemble_scopes(lines: Iterable[str]) -> List[GraphScope]:
    """Split the lines of one file into scopes.

    A `<Node>` that is not self-closing swallows exactly one following line,
    which supplies the node inputs when it is an `<Inputs>` record.
    """
    orchestrator = ScopeOrchestrator()
    stream: Iterator[str] = (line.rstrip("\r\n") for line in lines)

    for line in stream:
        if ENTITY_MARKER in line:
            orchestrator.enter_entity(extract_attributes(line).get("name"))

        if NODE_MARKER in line:
            keys = extract_attributes(line)
            inputs = {}
            if not line.endswith("/>"):
                continuation = next(stream, None)
                if continuation is not None and INPUTS_MARKER in continuation:
                    inputs = extract_attributes(continuation)
            if keys.get("id") is None:
                logger.debug("Skipping node record without id: %s", line.strip())
                continue
            orchestrator.add_node(parse_node(keys, inputs))
        elif EDGE_MARKER in line:
            orchestrator.add_edge(parse_edge(extract_attributes(line)))
        elif SCOPE_CLOSE_MARKER in line:
            scope = orchestrator.close_scope()
            if scope is not None:
                logger.debug(
                    "Closed scope %s with %d nodes, %d edges",
                    scope.entity_name,
                    len(scope.nodes),
                    len(scope.edges),
                )

    return orchestrator.finish()
