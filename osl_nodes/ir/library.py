from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..errors import GraphExtractionError


@dataclass
class Implementation:
    """Target-specific entry point and source file of a node definition."""
    name: str
    target: str
    function: str = ""
    file: str = ""


@dataclass
class PortDef:
    """An input or output declared on a NodeDef."""
    name: str
    type: str
    value: Any = None
    hidden: bool = False


@dataclass
class NodeDef:
    """
    Catalog entry describing a node's interface and its implementations.

    Implementations are keyed by target name (e.g. 'genosl').
    """
    name: str
    node: str
    type: str = "float"
    inputs: List[PortDef] = field(default_factory=list)
    outputs: List[PortDef] = field(default_factory=list)
    implementations: Dict[str, Implementation] = field(default_factory=dict)

    def __post_init__(self):
        # A NodeDef always has at least one output of its declared type
        if not self.outputs:
            self.outputs.append(PortDef("out", self.type))

    def add_input(self, name: str, type: str, value: Any = None, hidden: bool = False) -> PortDef:
        port = PortDef(name, type, value, hidden)
        self.inputs.append(port)
        return port

    def add_implementation(self, impl: Implementation) -> Implementation:
        self.implementations[impl.target] = impl
        return impl

    def get_implementation(self, target: str) -> Optional[Implementation]:
        return self.implementations.get(target)

    def get_input(self, name: str) -> Optional[PortDef]:
        for port in self.inputs:
            if port.name == name:
                return port
        return None


@dataclass
class NodeInstance:
    """A node element in a document, instantiating a NodeDef."""
    name: str
    nodedef: NodeDef
    values: Dict[str, Any] = field(default_factory=dict)

    def set_input_value(self, name: str, value: Any):
        if self.nodedef.get_input(name) is None:
            raise GraphExtractionError(
                f"NodeDef {self.nodedef.name} has no input '{name}'", node_name=self.name
            )
        self.values[name] = value


class LibraryDocument:
    """
    Catalog of node definitions plus transient node instances.

    The batch driver adds one instance at a time and removes it again, so
    child names only need to stay unique among live instances.
    """

    def __init__(self, name: str = "libraries"):
        self.name = name
        self._nodedefs: Dict[str, NodeDef] = {}
        self._children: Dict[str, NodeInstance] = {}

    def add_nodedef(self, nodedef: NodeDef) -> NodeDef:
        if nodedef.name in self._nodedefs:
            raise GraphExtractionError(f"Duplicate NodeDef name: {nodedef.name}")
        self._nodedefs[nodedef.name] = nodedef
        return nodedef

    def get_nodedef(self, name: str) -> Optional[NodeDef]:
        return self._nodedefs.get(name)

    def get_nodedefs(self) -> List[NodeDef]:
        return list(self._nodedefs.values())

    def add_node_instance(self, nodedef: NodeDef, name: str) -> NodeInstance:
        if name in self._children:
            raise GraphExtractionError(f"Document already has a child named {name}", node_name=name)
        node = NodeInstance(name, nodedef)
        self._children[name] = node
        return node

    def get_child(self, name: str) -> Optional[NodeInstance]:
        return self._children.get(name)

    def get_children(self) -> List[NodeInstance]:
        return list(self._children.values())

    def remove_child(self, name: str):
        self._children.pop(name, None)

    def __repr__(self):
        return f"<LibraryDocument {self.name} | {len(self._nodedefs)} NodeDefs | {len(self._children)} Nodes>"
