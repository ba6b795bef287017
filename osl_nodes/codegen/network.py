"""
OSL shader network generation.

Emits a shader graph as the line oriented network description understood
by OSL shading systems:

    param <type> <name> <value> ;
    shader <entryPoint> <instanceName> ;
    connect <fromInstance>.<fromOutput> <toInstance>.<toInput> ;

A shader instance has to be declared before any connection refers to it, so
connections are collected during the pass over the nodes and emitted after
every declaration.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Union

from ..errors import GenerationError, MissingImplementationError
from ..graph_extract import extract_graph
from ..ir.graph import ShaderGraph, ShaderInput, ShaderNode
from ..ir.library import Implementation, NodeDef, NodeInstance
from ..ir.shader import Shader, ShaderStage, PIXEL_STAGE
from .context import GenContext
from .interface import InterfacePublisher
from .syntax import NULL_CLOSURE, OslSyntax

logger = logging.getLogger(__name__)

# Shader attribute holding the comma separated implementation directories
INCLUDE_PATHS_ATTRIBUTE = "osl_include_paths"

# Synthetic sink used by tests to observe the network's terminal value
SINK_SHADER = "setCi"
SINK_INSTANCE = "root"

# FIXME: closure inputs that upstream default detection fails to flag as
# default. Remove once those inputs are pruned upstream.
EXCLUDED_INPUTS = frozenset({"backsurfaceshader", "displacementshader"})


@dataclass(frozen=True)
class VariantConfig:
    """Naming convention and target of a network generator."""
    name: str
    target: str
    nodedef_prefix: str = "ND_"
    supports_sink: bool = False


OSL_NODES = VariantConfig("oslnodes", "genosl", "ND_", supports_sink=False)
OSL_NETWORK = VariantConfig("oslnetwork", "genoslnetwork", "ND_", supports_sink=True)

VARIANTS = {v.name: v for v in (OSL_NODES, OSL_NETWORK)}


def get_variant(name: str) -> VariantConfig:
    if name not in VARIANTS:
        raise ValueError(f"Unknown generator variant '{name}', expected one of {sorted(VARIANTS)}")
    return VARIANTS[name]


def strip_prefix(name: str, prefix: str) -> str:
    """Remove a namespace prefix such as 'ND_', keeping names that are only the prefix."""
    if prefix and len(name) > len(prefix) and name.startswith(prefix):
        return name[len(prefix):]
    return name


class NetworkShaderGenerator:
    """
    Generates OSL shader network descriptions from shader graphs.
    """
    def __init__(self, variant: VariantConfig = OSL_NODES, syntax: Optional[OslSyntax] = None):
        self.variant = variant
        self.syntax = syntax
        self.publisher = InterfacePublisher()

    @property
    def target(self) -> str:
        return self.variant.target

    def generate(self, name: str, element: Union[ShaderGraph, NodeInstance, NodeDef],
                 context: Optional[GenContext] = None) -> Shader:
        """
        Generate a Shader for a graph, or for a library element wrapped
        into a one-node graph.

        Raises:
            MissingImplementationError: if any node lacks an implementation
                for this generator's target. No Shader is returned.
        """
        context = context or GenContext()
        syntax = self.syntax or OslSyntax(context.options.float_precision)

        graph = element if isinstance(element, ShaderGraph) else extract_graph(name, element)
        shader = self.create_shader(name, graph)
        stage = shader.get_stage(PIXEL_STAGE)

        include_dirs = self._emit_network(graph, stage, syntax, context)
        shader.set_attribute(INCLUDE_PATHS_ATTRIBUTE, ",".join(sorted(include_dirs)))

        return shader

    def create_shader(self, name: str, graph: ShaderGraph) -> Shader:
        shader = Shader(name, graph)
        self.publisher.publish(shader, graph)
        return shader

    def get_implementation(self, node: ShaderNode) -> Implementation:
        impl = node.nodedef.get_implementation(self.target) if node.nodedef else None
        if impl is None:
            raise MissingImplementationError(
                f"Could not find a {self.target} implementation for node {node.name} ({node.nodedef_name})",
                node_name=node.name,
                target=self.target,
            )
        return impl

    def entry_point(self, node: ShaderNode, impl: Implementation) -> str:
        if impl.function:
            return impl.function
        return strip_prefix(node.nodedef_name, self.variant.nodedef_prefix)

    def _emit_network(self, graph: ShaderGraph, stage: ShaderStage, syntax: OslSyntax,
                      context: GenContext) -> Set[str]:
        connections: List[str] = []
        include_dirs: Set[str] = set()
        last_node: Optional[ShaderNode] = None
        port_names = {node.name: self._port_names(node, syntax) for node in graph.nodes}

        for node in graph.nodes:
            names = port_names[node.name]
            for node_input in node.inputs:
                if node_input.is_default:
                    continue

                upstream = node_input.connection
                if upstream is None or graph.is_boundary(upstream):
                    self._emit_param(node_input, names[node_input.name], stage, syntax)
                else:
                    upstream_names = port_names.get(upstream.node.name) or self._port_names(upstream.node, syntax)
                    upstream_name = upstream_names[upstream.name]
                    connections.append(
                        f"connect {upstream.node.name}.{upstream_name} {node.name}.{names[node_input.name]} ;"
                    )

            impl = self.get_implementation(node)
            if impl.file:
                include_dirs.add(str(context.resolve_source(impl.file).parent))

            stage.emit_line(f"shader {self.entry_point(node, impl)} {node.name} ;")
            last_node = node

        for line in connections:
            stage.emit_line(line)

        if context.options.connect_sink and self.variant.supports_sink and last_node is not None:
            self._emit_sink(last_node, port_names[last_node.name], stage, syntax)

        return include_dirs

    def _port_names(self, node: ShaderNode, syntax: OslSyntax) -> Dict[str, str]:
        # Inputs and outputs share one parameter namespace per shader
        return syntax.make_unique_names([p.name for p in node.inputs + node.outputs])

    def _emit_param(self, node_input: ShaderInput, name: str, stage: ShaderStage, syntax: OslSyntax):
        if node_input.name in EXCLUDED_INPUTS:
            return

        try:
            value = syntax.format_value(node_input.value, node_input.type)
        except (TypeError, ValueError) as e:
            raise GenerationError(
                f"Invalid value for input {node_input.node.name}.{node_input.name}: {e}"
            ) from e
        if value is None or value == NULL_CLOSURE:
            return

        stage.emit_line(f"param {syntax.type_name(node_input.type)} {name} {value} ;")

    def _emit_sink(self, node: ShaderNode, names: Dict[str, str], stage: ShaderStage, syntax: OslSyntax):
        output = node.get_output()
        if output is None:
            logger.warning(f"Node {node.name} has no output to connect to the {SINK_SHADER} sink")
            return

        sink_input = "input_" + syntax.type_name(output.type).replace(" ", "_")
        stage.emit_line(f"shader {SINK_SHADER} {SINK_INSTANCE} ;")
        stage.emit_line(
            f"connect {node.name}.{names[output.name]} {SINK_INSTANCE}.{sink_input} ;"
        )
