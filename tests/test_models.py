"""Tests for the in-memory element tree."""

from xmldrive.models import Document, Node, decode, encode, is_dir_type


class TestNode:

    def test_defaults(self):
        node = Node(tag="book")
        assert node.attributes == {}
        assert node.text is None
        assert node.has_text is False
        assert node.children == []

    def test_set_attributes_replaces_everything(self):
        node = Node(tag="book")
        node.set_attributes({"a": "1", "b": "2"})
        node.set_attributes({"c": "3"})
        assert node.attributes == {"c": "3"}

    def test_set_attributes_keeps_replacement_order(self):
        node = Node(tag="book")
        node.set_attributes({"z": "1", "a": "2", "m": "3"})
        assert list(node.attributes) == ["z", "a", "m"]

    def test_set_attributes_copies(self):
        node = Node(tag="book")
        replacement = {"a": "1"}
        node.set_attributes(replacement)
        replacement["b"] = "2"
        assert node.attributes == {"a": "1"}

    def test_empty_text_is_present(self):
        node = Node(tag="book")
        node.set_text("")
        assert node.has_text is True
        assert node.text == ""


class TestDocument:

    def test_empty_document_has_no_root(self):
        doc = Document()
        assert doc.root is None
        assert doc.root_node is None
        assert len(doc) == 0

    def test_add_node_links_parent_and_child(self):
        doc = Document()
        root = doc.add_node("catalog", source="0_catalog")
        child = doc.add_node("book", source="3_book", parent=root)
        doc.root = root
        assert doc.node(root).children == [child]
        assert doc.node(child).parent == root
        assert [n.tag for _, n in doc.children(root)] == ["book"]

    def test_handles_are_stable(self):
        doc = Document()
        root = doc.add_node("a")
        first = doc.add_node("b", parent=root)
        doc.add_node("c", parent=root)
        assert doc.node(first).tag == "b"

    def test_backing_path_uses_source_names(self):
        doc = Document()
        root = doc.add_node("catalog", source="0_catalog")
        book = doc.add_node("book", source="7_book", parent=root)
        title = doc.add_node("title", source="0_title", parent=book)
        assert doc.backing_path(title) == ["0_catalog", "7_book", "0_title"]
        assert doc.backing_path(root) == ["0_catalog"]


class TestEncoding:

    def test_arbitrary_bytes_round_trip(self):
        raw = b"caf\xc3\xa9 \xff\xfe\x00end"
        assert encode(decode(raw)) == raw


class TestDirTypes:

    def test_dir_types(self):
        assert is_dir_type("root")
        assert is_dir_type("element")
        assert not is_dir_type("attr_file")
        assert not is_dir_type("text_file")
