import logging

from ..ir.graph import ShaderGraph
from ..ir.shader import Shader, ShaderStage, PIXEL_STAGE, UNIFORMS, INPUTS, OUTPUTS

logger = logging.getLogger(__name__)


class InterfacePublisher:
    """
    Creates the published surface of a shader network.

    Graph input sockets become uniforms only when some node uses them and the
    graph lets users edit them. Every graph output socket is published.
    """
    def publish(self, shader: Shader, graph: ShaderGraph) -> ShaderStage:
        stage = shader.create_stage(PIXEL_STAGE)
        stage.create_uniform_block(UNIFORMS)
        stage.create_input_block(INPUTS)
        stage.create_output_block(OUTPUTS)

        uniforms = stage.get_uniform_block(UNIFORMS)
        for socket in graph.input_sockets:
            if socket.connections and graph.is_editable(socket):
                uniforms.add(socket)

        outputs = stage.get_output_block(OUTPUTS)
        for socket in graph.output_sockets:
            outputs.add(socket)

        logger.debug(f"Published {len(uniforms)} uniforms and {len(outputs)} outputs for {shader.name}")
        return stage
