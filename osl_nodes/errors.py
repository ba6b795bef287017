"""
Custom exceptions for OSL node generation.

This module provides a hierarchy of exceptions so that callers can tell
fatal setup problems apart from per-definition failures.

Exception Hierarchy:
    OslNodesError (base)
    ├── SetupError
    ├── UnsupportedDefinition
    ├── GenerationError
    │   ├── MissingImplementationError
    │   └── GraphExtractionError
    └── CompileError
"""

from typing import List, Optional


class OslNodesError(Exception):
    """Base exception for all OSL node generation errors."""
    pass


class SetupError(OslNodesError):
    """Raised when the batch driver is given unusable paths."""

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


class UnsupportedDefinition(OslNodesError):
    """Raised when a node definition has no implementation for the target."""

    def __init__(self, message: str, nodedef_name: str = None, target: str = None):
        super().__init__(message)
        self.nodedef_name = nodedef_name
        self.target = target


# =============================================================================
# Generation Errors
# =============================================================================

class GenerationError(OslNodesError):
    """Base exception for shader network generation errors."""
    pass


class MissingImplementationError(GenerationError):
    """Raised when a node of the network has no implementation for the target."""

    def __init__(self, message: str, node_name: str = None, target: str = None):
        super().__init__(message)
        self.node_name = node_name
        self.target = target


class GraphExtractionError(GenerationError):
    """Raised when a shader graph cannot be built from a library element."""

    def __init__(self, message: str, node_name: str = None):
        super().__init__(message)
        self.node_name = node_name


# =============================================================================
# Compilation Errors
# =============================================================================

class CompileError(OslNodesError):
    """
    Raised when the external OSL compiler fails.

    Attributes:
        source_path: The source file handed to the compiler
        error_log: Diagnostic lines reported by the compiler, verbatim
    """

    def __init__(self, message: str, source_path: str = None, error_log: Optional[List[str]] = None):
        super().__init__(message)
        self.source_path = source_path
        self.error_log = list(error_log or [])

    def format_with_log(self) -> str:
        """Format the error followed by the compiler's own diagnostics."""
        lines = [f"CompileError: {self}"]
        if self.source_path:
            lines.append(f"Source: {self.source_path}")
        if self.error_log:
            lines.append("--- COMPILER OUTPUT ---")
            lines.extend(self.error_log)
            lines.append("-----------------------")
        return '\n'.join(lines)
