# Core Graph Extraction Logic
# Wraps a library node instance into a single-node ShaderGraph

import logging
from typing import Union

from ..errors import GraphExtractionError
from ..ir.graph import ShaderGraph
from ..ir.library import NodeDef, NodeInstance

logger = logging.getLogger(__name__)


def extract_graph(name: str, element: Union[NodeInstance, NodeDef]) -> ShaderGraph:
    """
    Builds a one-node ShaderGraph around a node instance.

    Every definition input becomes a graph input socket connected to the
    node input of the same name, and every definition output is published
    as a graph output socket. Inputs the instance does not override are
    flagged as default.
    """
    if isinstance(element, NodeDef):
        element = NodeInstance(element.name, element)
    if not isinstance(element, NodeInstance):
        raise GraphExtractionError(f"Cannot build a shader graph from {element!r}")

    nodedef = element.nodedef
    graph = ShaderGraph(name)
    node = graph.add_node(element.name, nodedef)

    for port in nodedef.inputs:
        is_default = port.name not in element.values
        value = port.value if is_default else element.values[port.name]

        socket = graph.add_input_socket(port.name, port.type, value=value, editable=not port.hidden)
        node_input = node.add_input(port.name, port.type, value=value, is_default=is_default)
        graph.connect(socket, node_input)

    for port in nodedef.outputs:
        node_output = node.add_output(port.name, port.type)
        socket = graph.add_output_socket(port.name, port.type)
        graph.connect(node_output, socket)

    logger.debug(f"Extracted graph {name}: {len(nodedef.inputs)} inputs, {len(nodedef.outputs)} outputs")
    return graph
