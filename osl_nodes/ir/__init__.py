# Intermediate representation of node libraries, shader graphs and shaders

from .types import DataType, parse_value
from .library import Implementation, PortDef, NodeDef, NodeInstance, LibraryDocument
from .graph import ShaderPort, ShaderInput, ShaderOutput, ShaderNode, ShaderGraph
from .shader import Shader, ShaderStage, VariableBlock, PIXEL_STAGE, UNIFORMS, INPUTS, OUTPUTS

__all__ = [
    'DataType', 'parse_value',
    'Implementation', 'PortDef', 'NodeDef', 'NodeInstance', 'LibraryDocument',
    'ShaderPort', 'ShaderInput', 'ShaderOutput', 'ShaderNode', 'ShaderGraph',
    'Shader', 'ShaderStage', 'VariableBlock', 'PIXEL_STAGE', 'UNIFORMS', 'INPUTS', 'OUTPUTS',
]
