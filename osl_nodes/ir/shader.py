from typing import Any, Dict, List, Optional

from .graph import ShaderGraph, ShaderPort

# Stage identifiers
PIXEL_STAGE = "pixel"

# Identifiers for OSL variable blocks
UNIFORMS = "u"
INPUTS = "i"
OUTPUTS = "o"


class VariableBlock:
    """Named, ordered and duplicate-free collection of published ports."""
    def __init__(self, name: str):
        self.name = name
        self._ports: List[ShaderPort] = []

    def add(self, port: ShaderPort):
        if port not in self._ports:
            self._ports.append(port)

    def find(self, name: str) -> Optional[ShaderPort]:
        for port in self._ports:
            if port.name == name:
                return port
        return None

    @property
    def names(self) -> List[str]:
        return [p.name for p in self._ports]

    def __iter__(self):
        return iter(self._ports)

    def __len__(self):
        return len(self._ports)

    def __repr__(self):
        return f"<VariableBlock {self.name} | {len(self._ports)} Ports>"


class ShaderStage:
    """Source lines and variable blocks of one shader stage."""
    def __init__(self, name: str):
        self.name = name
        self.lines: List[str] = []
        self.uniform_blocks: Dict[str, VariableBlock] = {}
        self.input_blocks: Dict[str, VariableBlock] = {}
        self.output_blocks: Dict[str, VariableBlock] = {}

    def create_uniform_block(self, name: str) -> VariableBlock:
        return self.uniform_blocks.setdefault(name, VariableBlock(name))

    def create_input_block(self, name: str) -> VariableBlock:
        return self.input_blocks.setdefault(name, VariableBlock(name))

    def create_output_block(self, name: str) -> VariableBlock:
        return self.output_blocks.setdefault(name, VariableBlock(name))

    def get_uniform_block(self, name: str) -> VariableBlock:
        return self.uniform_blocks[name]

    def get_input_block(self, name: str) -> VariableBlock:
        return self.input_blocks[name]

    def get_output_block(self, name: str) -> VariableBlock:
        return self.output_blocks[name]

    def emit_line(self, line: str):
        self.lines.append(line)

    @property
    def source_code(self) -> str:
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"


class Shader:
    """
    Result of one generation call: staged source text plus attributes.
    """
    def __init__(self, name: str, graph: ShaderGraph):
        self.name = name
        self.graph = graph
        self.stages: Dict[str, ShaderStage] = {}
        self.attributes: Dict[str, Any] = {}

    def create_stage(self, name: str) -> ShaderStage:
        return self.stages.setdefault(name, ShaderStage(name))

    def get_stage(self, name: str = PIXEL_STAGE) -> ShaderStage:
        return self.stages[name]

    def set_attribute(self, name: str, value: Any):
        self.attributes[name] = value

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def get_source_code(self, stage: str = PIXEL_STAGE) -> str:
        return self.stages[stage].source_code

    def __repr__(self):
        return f"<Shader {self.name} | stages: {', '.join(self.stages)}>"
