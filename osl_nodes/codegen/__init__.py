# Code Generation Package
# Emits OSL shader network descriptions from shader graphs

from .context import GenContext, GenOptions
from .interface import InterfacePublisher
from .network import (
    NetworkShaderGenerator,
    VariantConfig,
    OSL_NODES,
    OSL_NETWORK,
    INCLUDE_PATHS_ATTRIBUTE,
    get_variant,
    strip_prefix,
)
from .syntax import OslSyntax

__all__ = [
    'GenContext', 'GenOptions', 'InterfacePublisher', 'NetworkShaderGenerator',
    'VariantConfig', 'OSL_NODES', 'OSL_NETWORK', 'INCLUDE_PATHS_ATTRIBUTE',
    'get_variant', 'strip_prefix', 'OslSyntax',
]
