"""
Pytest configuration and shared fixtures for osl_nodes tests.

This file provides:
1. Node definition and graph fixtures
2. Fake OSL compiler executables
3. Helper functions for common assertions on emitted networks

Usage:
    pytest tests/ -v
"""

import os
import stat

import pytest

from osl_nodes.ir.graph import ShaderGraph
from osl_nodes.ir.library import Implementation, LibraryDocument, NodeDef, PortDef


# =============================================================================
# FAKE COMPILERS
# =============================================================================

FAKE_OSLC = """#!/bin/sh
out=""
while [ $# -gt 0 ]; do
  if [ "$1" = "-o" ]; then
    shift
    out="$1"
  fi
  shift
done
echo "compiled" > "$out"
"""

FAILING_OSLC = """#!/bin/sh
echo "shader.osl:3: error: Syntax error: syntax error" >&2
echo "FAILED shader.osl" >&2
exit 1
"""


def _write_script(path, content):
    path.write_text(content)
    os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_oslc(tmp_path):
    """An executable that writes the file passed after '-o'."""
    return _write_script(tmp_path / "oslc", FAKE_OSLC)


@pytest.fixture
def failing_oslc(tmp_path):
    """An executable that reports an error and exits with code 1."""
    return _write_script(tmp_path / "oslc_fail", FAILING_OSLC)


# =============================================================================
# NODE DEFINITIONS
# =============================================================================

def make_nodedef(name, function=None, file=None, target="genosl", type="float", inputs=()):
    """
    Creates a NodeDef with an optional implementation for one target.

    Example:
        nd = make_nodedef("ND_add_float", "mx_add_float", "mx_add.osl",
                          inputs=[("in1", "float", 0.0)])
    """
    nodedef = NodeDef(name, name[3:] if name.startswith("ND_") else name, type)
    for port in inputs:
        nodedef.add_input(*port)
    if function is not None:
        nodedef.add_implementation(Implementation(f"IM_{name[3:]}_{target}", target, function, file or ""))
    return nodedef


@pytest.fixture
def library(tmp_path):
    """
    Library of three definitions, the second without an implementation.

    NodeDefs:
        ND_add_float     (genosl)
        ND_unsupported   (no implementation)
        ND_mix_color3    (genosl)
    """
    src = tmp_path / "libraries" / "stdlib" / "genosl"
    src.mkdir(parents=True)

    doc = LibraryDocument("TestLibrary")
    doc.add_nodedef(make_nodedef(
        "ND_add_float", "mx_add_float", str(src / "mx_add_float.osl"),
        inputs=[("in1", "float", 0.0), ("in2", "float", 0.0)],
    ))
    doc.add_nodedef(make_nodedef("ND_unsupported", inputs=[("in", "float", 1.0)]))
    doc.add_nodedef(make_nodedef(
        "ND_mix_color3", "mx_mix_color3", str(src / "mx_mix_color3.osl"), type="color3",
        inputs=[("fg", "color3", (0.0, 0.0, 0.0)), ("bg", "color3", (0.0, 0.0, 0.0)),
                ("mix", "float", 0.0)],
    ))
    return doc


@pytest.fixture
def two_node_graph():
    """
    Creates the graph A.out -> B.in.

    Nodes:
        A: ND_a (genosl: implA), output 'out'
        B: ND_b (genosl: implB), input 'in', output 'out'
    """
    nd_a = make_nodedef("ND_a", "implA", "/libs/a/mx_a.osl")
    nd_b = make_nodedef("ND_b", "implB", "/libs/b/mx_b.osl", inputs=[("in", "float", 0.0)])

    graph = ShaderGraph("TwoNodes")
    node_a = graph.add_node("A", nd_a)
    out_a = node_a.add_output("out", "float")

    node_b = graph.add_node("B", nd_b)
    in_b = node_b.add_input("in", "float", value=0.0)
    node_b.add_output("out", "float")

    graph.connect(out_a, in_b)
    return graph


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def statements(source, keyword):
    """Return the lines of an emitted network starting with a keyword."""
    return [line for line in source.splitlines() if line.startswith(keyword + " ")]


def assert_connections_after_declarations(source):
    """Assert that no 'shader' or 'param' statement follows a 'connect'."""
    lines = source.splitlines()
    connect_idx = [i for i, line in enumerate(lines) if line.startswith("connect ")]
    declare_idx = [i for i, line in enumerate(lines) if line.startswith(("shader ", "param "))]
    if connect_idx and declare_idx:
        assert max(declare_idx) < min(connect_idx), f"Connection emitted before a declaration:\n{source}"
