from typing import Any, Dict, List, Optional

from ..errors import GraphExtractionError
from .library import NodeDef


class ShaderPort:
    """Base class for typed node ports."""
    def __init__(self, node: Any, name: str, type: str):
        # For graph sockets, node is the ShaderGraph itself
        self.node = node
        self.name = name
        self.type = type

    def __repr__(self):
        owner = getattr(self.node, 'name', '?')
        return f"<{type(self).__name__} {owner}.{self.name}:{self.type}>"


class ShaderOutput(ShaderPort):
    def __init__(self, node: Any, name: str, type: str):
        super().__init__(node, name, type)
        self.connections: List['ShaderInput'] = []
        # Only meaningful on graph input sockets
        self.value: Any = None
        self.editable = True


class ShaderInput(ShaderPort):
    def __init__(self, node: Any, name: str, type: str, value: Any = None, is_default: bool = False):
        super().__init__(node, name, type)
        self.value = value
        self.is_default = is_default
        self.connection: Optional[ShaderOutput] = None

    def make_connection(self, src: ShaderOutput):
        self.break_connection()
        self.connection = src
        src.connections.append(self)

    def break_connection(self):
        if self.connection is not None:
            self.connection.connections.remove(self)
            self.connection = None


class ShaderNode:
    """
    A node of a shader graph.

    Inputs keep their declaration order; the first output is the primary one.
    """
    def __init__(self, name: str, nodedef: Optional[NodeDef] = None, nodedef_name: str = ""):
        self.name = name
        self.nodedef = nodedef
        self.nodedef_name = nodedef_name or (nodedef.name if nodedef else "")
        self.inputs: List[ShaderInput] = []
        self.outputs: List[ShaderOutput] = []
        self._input_map: Dict[str, ShaderInput] = {}
        self._output_map: Dict[str, ShaderOutput] = {}

    def add_input(self, name: str, type: str, value: Any = None, is_default: bool = False) -> ShaderInput:
        if name in self._input_map:
            raise GraphExtractionError(f"Node {self.name} already has an input '{name}'", node_name=self.name)
        port = ShaderInput(self, name, type, value, is_default)
        self.inputs.append(port)
        self._input_map[name] = port
        return port

    def add_output(self, name: str, type: str) -> ShaderOutput:
        if name in self._output_map:
            raise GraphExtractionError(f"Node {self.name} already has an output '{name}'", node_name=self.name)
        port = ShaderOutput(self, name, type)
        self.outputs.append(port)
        self._output_map[name] = port
        return port

    def get_input(self, name: str) -> Optional[ShaderInput]:
        return self._input_map.get(name)

    def get_output(self, name: str = None) -> Optional[ShaderOutput]:
        if name is None:
            return self.outputs[0] if self.outputs else None
        return self._output_map.get(name)

    def __repr__(self):
        return f"<ShaderNode {self.name} ({self.nodedef_name})>"


class ShaderGraph:
    """
    Ordered network of shader nodes with a published socket interface.

    Input sockets are outputs owned by the graph, so internal inputs connected
    to them see `connection.node is graph`. Output sockets are inputs owned by
    the graph.
    """
    def __init__(self, name: str):
        self.name = name
        self.nodes: List[ShaderNode] = []
        self.input_sockets: List[ShaderOutput] = []
        self.output_sockets: List[ShaderInput] = []
        self._node_map: Dict[str, ShaderNode] = {}

    def add_node(self, name: str, nodedef: Optional[NodeDef] = None, nodedef_name: str = "") -> ShaderNode:
        if name in self._node_map:
            raise GraphExtractionError(f"Graph {self.name} already has a node named {name}", node_name=name)
        node = ShaderNode(name, nodedef, nodedef_name)
        self.nodes.append(node)
        self._node_map[name] = node
        return node

    def get_node(self, name: str) -> Optional[ShaderNode]:
        return self._node_map.get(name)

    def add_input_socket(self, name: str, type: str, value: Any = None, editable: bool = True) -> ShaderOutput:
        socket = ShaderOutput(self, name, type)
        socket.value = value
        socket.editable = editable
        self.input_sockets.append(socket)
        return socket

    def add_output_socket(self, name: str, type: str) -> ShaderInput:
        socket = ShaderInput(self, name, type)
        self.output_sockets.append(socket)
        return socket

    def connect(self, src: ShaderOutput, dst: ShaderInput):
        dst.make_connection(src)

    def is_editable(self, socket: ShaderOutput) -> bool:
        """Authoring policy: sockets of hidden definition inputs are not editable."""
        return socket.editable

    def is_boundary(self, port: Optional[ShaderOutput]) -> bool:
        """True for graph input sockets, i.e. connections that do not originate at a node."""
        return port is not None and port.node is self

    def __repr__(self):
        return f"<ShaderGraph {self.name} | {len(self.nodes)} Nodes>"
