# Runtime Package
# Invokes the external OSL compiler on generated sources

from .oslc import OslCompiler, OSL_EXTENSION, OSO_EXTENSION

__all__ = ['OslCompiler', 'OSL_EXTENSION', 'OSO_EXTENSION']
