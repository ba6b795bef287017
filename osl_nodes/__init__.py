"""
OSL shader network generation for MaterialX node libraries.
"""

__version__ = "0.1.0"

from .codegen import GenContext, GenOptions, NetworkShaderGenerator, OSL_NODES, OSL_NETWORK
from .batch import BatchCompiler, BatchReport
from .runtime import OslCompiler

__all__ = [
    '__version__', 'GenContext', 'GenOptions', 'NetworkShaderGenerator',
    'OSL_NODES', 'OSL_NETWORK', 'BatchCompiler', 'BatchReport', 'OslCompiler',
]
