# Graph Extraction Package
# Converts library node instances into shader graphs

from .core import extract_graph

__all__ = ['extract_graph']
