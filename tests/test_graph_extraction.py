import unittest

from osl_nodes.codegen import NetworkShaderGenerator
from osl_nodes.errors import GraphExtractionError
from osl_nodes.graph_extract import extract_graph
from osl_nodes.ir.graph import ShaderGraph
from osl_nodes.ir.library import LibraryDocument, NodeDef, PortDef

from conftest import make_nodedef


def surface_nodedef():
    nd = make_nodedef(
        "ND_surface_test", "mx_surface_test", "/libs/pbrlib/genosl/mx_surface_test.osl",
        type="surfaceshader",
        inputs=[("base", "float", 0.8), ("base_color", "color3", (1.0, 1.0, 1.0))],
    )
    nd.add_input("internal", "float", 0.0, hidden=True)
    nd.add_input("backsurfaceshader", "surfaceshader")
    return nd


class TestGraphExtraction(unittest.TestCase):
    def test_one_node_graph(self):
        nd = surface_nodedef()
        graph = extract_graph("surface1", nd)

        self.assertIsInstance(graph, ShaderGraph)
        self.assertEqual([n.name for n in graph.nodes], ["ND_surface_test"])
        node = graph.nodes[0]
        self.assertIs(node.nodedef, nd)
        self.assertEqual([i.name for i in node.inputs], ["base", "base_color", "internal", "backsurfaceshader"])
        self.assertEqual([s.name for s in graph.input_sockets], [i.name for i in node.inputs])
        self.assertEqual([s.name for s in graph.output_sockets], ["out"])

    def test_inputs_are_connected_to_graph_sockets(self):
        doc = LibraryDocument()
        nd = doc.add_nodedef(surface_nodedef())
        instance = doc.add_node_instance(nd, "surface1")

        graph = extract_graph("surface1", instance)
        node = graph.get_node("surface1")

        for node_input, socket in zip(node.inputs, graph.input_sockets):
            self.assertIs(node_input.connection, socket)
            self.assertTrue(graph.is_boundary(node_input.connection))
            self.assertTrue(node_input.is_default)
        self.assertIs(graph.output_sockets[0].connection, node.get_output("out"))
        self.assertFalse(graph.is_editable(graph.input_sockets[2]))

    def test_overrides_are_not_default(self):
        doc = LibraryDocument()
        nd = doc.add_nodedef(surface_nodedef())
        instance = doc.add_node_instance(nd, "surface1")
        instance.set_input_value("base", 0.25)

        graph = extract_graph("surface1", instance)
        base = graph.get_node("surface1").get_input("base")

        self.assertFalse(base.is_default)
        self.assertEqual(base.value, 0.25)
        self.assertEqual(graph.input_sockets[0].value, 0.25)

    def test_unknown_override_is_rejected(self):
        instance = LibraryDocument().add_node_instance(surface_nodedef(), "surface1")
        with self.assertRaises(GraphExtractionError):
            instance.set_input_value("missing", 1.0)

    def test_default_instance_emits_declaration_only(self):
        doc = LibraryDocument()
        nd = doc.add_nodedef(surface_nodedef())
        instance = doc.add_node_instance(nd, "surface1")

        source = NetworkShaderGenerator().generate("surface1", instance).get_source_code()

        self.assertEqual(source, "shader mx_surface_test surface1 ;\n")

    def test_overridden_instance_emits_parameters(self):
        doc = LibraryDocument()
        nd = doc.add_nodedef(surface_nodedef())
        instance = doc.add_node_instance(nd, "surface1")
        instance.set_input_value("base_color", (0.5, 0.25, 0.0))
        instance.set_input_value("backsurfaceshader", "")

        source = NetworkShaderGenerator().generate("surface1", instance).get_source_code()

        self.assertEqual(source.splitlines(), [
            "param color base_color 0.500000 0.250000 0.000000 ;",
            "shader mx_surface_test surface1 ;",
        ])

    def test_duplicate_output_names_fail(self):
        nd = NodeDef("ND_broken", "broken", outputs=[PortDef("out", "float"), PortDef("out", "float")])
        with self.assertRaises(GraphExtractionError):
            extract_graph("broken", nd)

    def test_rejects_other_elements(self):
        with self.assertRaises(GraphExtractionError):
            extract_graph("bad", "ND_not_an_element")


class TestLibraryDocument(unittest.TestCase):
    def test_instances_are_transient(self):
        doc = LibraryDocument()
        nd = doc.add_nodedef(make_nodedef("ND_a", "implA"))

        doc.add_node_instance(nd, "a")
        self.assertEqual([c.name for c in doc.get_children()], ["a"])
        with self.assertRaises(GraphExtractionError):
            doc.add_node_instance(nd, "a")

        doc.remove_child("a")
        self.assertEqual(doc.get_children(), [])
        doc.add_node_instance(nd, "a")
        self.assertIsNotNone(doc.get_child("a"))

    def test_duplicate_nodedefs_are_rejected(self):
        doc = LibraryDocument()
        doc.add_nodedef(make_nodedef("ND_a"))
        with self.assertRaises(GraphExtractionError):
            doc.add_nodedef(make_nodedef("ND_a"))

    def test_nodedef_defaults_to_single_output(self):
        nd = NodeDef("ND_c", "c", "color3")
        self.assertEqual([(o.name, o.type) for o in nd.outputs], [("out", "color3")])

    def test_duplicate_node_names_in_graph(self):
        graph = ShaderGraph("Dup")
        graph.add_node("n")
        with self.assertRaises(GraphExtractionError):
            graph.add_node("n")
