# test_types.py
import unittest

from convo.narrative.errors import NodeNotFound
from convo.narrative.types import Link, Node, Tree


class TestLink(unittest.TestCase):
    def test_target_defaults_to_name(self):
        link = Link(name="end", dialogue="Goodbye!")
        self.assertEqual(link.target, "end")

    def test_explicit_target_and_retarget(self):
        link = Link(name="leave", dialogue="Bye.", target="end")
        self.assertEqual(link.target, "end")
        link.retarget("start")
        self.assertEqual(link.target, "start")
        self.assertEqual(link.name, "leave")

    def test_may_point_nowhere(self):
        # Forward references are fine until the tree is validated
        link = Link(name="later", target="not_built_yet")
        self.assertEqual(link.target, "not_built_yet")


class TestNode(unittest.TestCase):
    def test_new_node_is_terminal(self):
        node = Node("How are you?")
        self.assertEqual(node.dialogue, "How are you?")
        self.assertTrue(node.is_terminal())
        self.assertEqual(len(node), 0)
        self.assertEqual(list(node.link_items()), [])

    def test_add_and_get_link(self):
        node = Node("Hi")
        link = node.add_link("end", "bye")
        self.assertIs(node.get_link("end"), link)
        self.assertEqual(link.target, "end")
        self.assertIsNone(node.get_link("missing"))
        self.assertFalse(node.is_terminal())

    def test_add_link_overwrites_in_place(self):
        node = Node("Hi")
        node.add_link("a", "first")
        node.add_link("b", "second")
        node.add_link("a", "replaced", target="b")
        self.assertEqual(len(node), 2)
        self.assertEqual(node.get_link("a").dialogue, "replaced")
        self.assertEqual(node.get_link("a").target, "b")
        # Replacement keeps the original slot
        self.assertEqual([name for name, _ in node.link_items()], ["a", "b"])

    def test_remove_link_missing_is_noop(self):
        node = Node("Hi")
        node.add_link("end", "bye")
        node.remove_link("nope")
        self.assertEqual(len(node), 1)
        node.remove_link("end")
        self.assertTrue(node.is_terminal())

    def test_link_items_is_ordered_and_restartable(self):
        node = Node("Pick one")
        for name in ("c", "a", "b"):
            node.add_link(name, name.upper())
        items = node.link_items()
        self.assertEqual([n for n, _ in items], ["c", "a", "b"])
        self.assertEqual([n for n, _ in items], ["c", "a", "b"])
        # The view is live
        node.add_link("d", "D")
        self.assertEqual([n for n, _ in items], ["c", "a", "b", "d"])

    def test_terminal_node_is_truthy(self):
        node = Node("The end.")
        self.assertEqual(len(node), 0)
        self.assertTrue(node)

    def test_set_dialogue(self):
        node = Node("old")
        node.set_dialogue("new")
        self.assertEqual(node.dialogue, "new")


class TestTree(unittest.TestCase):
    def test_new_tree_is_empty(self):
        tree = Tree()
        self.assertTrue(tree)
        self.assertIsNone(tree.root)
        self.assertIsNone(tree.root_node())
        self.assertEqual(len(tree), 0)

    def test_add_then_get(self):
        tree = Tree()
        node = Node("The only node.")
        returned = tree.add_node("root", node)
        self.assertIs(returned, node)
        self.assertIs(tree.get_node("root"), node)
        self.assertIn("root", tree)

    def test_add_node_default_node(self):
        tree = Tree()
        node = tree.add_node("blank")
        self.assertEqual(node.dialogue, "")
        self.assertIs(tree.get_node("blank"), node)

    def test_add_existing_id_overwrites(self):
        tree = Tree()
        tree.add_node("x", Node("first"))
        tree.add_node("y", Node("other"))
        tree.add_node("x", Node("second"))
        self.assertEqual(len(tree), 2)
        self.assertEqual(tree.get_node("x").dialogue, "second")
        self.assertEqual([i for i, _ in tree.node_items()], ["x", "y"])

    def test_overwrite_is_logged(self):
        tree = Tree()
        tree.add_node("x", Node("first"))
        with self.assertLogs("convo.narrative.types", level="DEBUG") as logs:
            tree.add_node("x", Node("second"))
        self.assertIn("Overwriting node 'x'", logs.output[0])

    def test_remove_node(self):
        tree = Tree()
        tree.add_node("x", Node("X"))
        removed = tree.remove_node("x")
        self.assertEqual(removed.dialogue, "X")
        self.assertIsNone(tree.get_node("x"))
        self.assertIsNone(tree.remove_node("x"))

    def test_remove_node_leaves_links_dangling(self):
        tree = Tree()
        tree.add_node("a", Node("A")).add_link("b", "to b")
        tree.add_node("b", Node("B"))
        tree.remove_node("b")
        self.assertEqual(tree.get_node("a").get_link("b").target, "b")

    def test_root_node(self):
        tree = Tree()
        tree.set_root("root")
        # Root may be set before the node exists
        self.assertEqual(tree.root, "root")
        self.assertIsNone(tree.root_node())
        tree.add_node("root", Node("A node."))
        self.assertEqual(tree.root_node().dialogue, "A node.")

    def test_link_helper(self):
        tree = Tree()
        tree.add_node("start", Node("Hi"))
        link = tree.link("start", "end", "bye")
        self.assertEqual((link.name, link.target), ("end", "end"))
        named = tree.link("start", "end", "later", name="leave")
        self.assertEqual((named.name, named.target), ("leave", "end"))
        with self.assertRaises(NodeNotFound):
            tree.link("ghost", "end")

    def test_clear(self):
        tree = Tree()
        tree.add_node("root", Node("The root."))
        tree.set_root("root")
        tree.clear()
        self.assertEqual(len(tree), 0)
        self.assertIsNone(tree.root)
        self.assertIsNone(tree.root_node())


if __name__ == "__main__":
    unittest.main()
