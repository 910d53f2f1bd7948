import pytest

from rearrange_toolkit.core.document import TextDocument, XmlTree, document_type_name
from rearrange_toolkit.core.exceptions import DocumentParseError, MarkerReleasedError
from rearrange_toolkit.core.interfaces import TextBuffer, TreeModel


class TestMarkers:

    def test_insert_before_marker_shifts_it(self):
        doc = TextDocument("abcdef")
        marker = doc.create_marker(3)
        doc.insert(1, "XY")
        assert marker.resolve() == 5
        assert doc.text == "aXYbcdef"

    def test_insert_after_marker_leaves_it(self):
        doc = TextDocument("abcdef")
        marker = doc.create_marker(3)
        doc.insert(4, "XY")
        assert marker.resolve() == 3

    def test_insert_at_marker_respects_insertion_type(self):
        doc = TextDocument("abcdef")
        stays = doc.create_marker(3)
        advances = doc.create_marker(3, insertion_type=True)
        doc.insert(3, "XY")
        assert stays.resolve() == 3
        assert advances.resolve() == 5

    def test_delete_around_marker_collapses_it(self):
        doc = TextDocument("abcdef")
        marker = doc.create_marker(3)
        assert doc.delete(1, 5) == "bcde"
        assert marker.resolve() == 1
        assert doc.text == "af"

    def test_delete_before_marker_shifts_it_left(self):
        doc = TextDocument("abcdef")
        marker = doc.create_marker(5)
        doc.delete(0, 2)
        assert marker.resolve() == 3

    def test_position_ref_keeps_inserted_text_outside(self):
        doc = TextDocument("xx<a/>yy")
        ref = doc.create_position_ref(2, 6)
        doc.insert(2, "11")
        doc.insert(8, "22")
        start, end = ref.resolve()
        assert doc.substring(start, end) == "<a/>"
        ref.release()
        assert ref.released
        assert doc.live_marker_count == 0

    def test_released_marker_cannot_be_resolved(self):
        doc = TextDocument("abc")
        marker = doc.create_marker(1)
        marker.release()
        assert marker.released
        with pytest.raises(MarkerReleasedError):
            marker.resolve()

    def test_release_twice_is_harmless_and_untracks(self):
        doc = TextDocument("abc")
        marker = doc.create_marker(1)
        other = doc.create_marker(2)
        assert doc.live_marker_count == 2
        marker.release()
        marker.release()
        assert doc.live_marker_count == 1
        other.release()
        assert doc.live_marker_count == 0

    def test_invalid_ranges_raise(self):
        doc = TextDocument("abc")
        with pytest.raises(IndexError):
            doc.insert(4, "x")
        with pytest.raises(IndexError):
            doc.delete(2, 1)
        with pytest.raises(IndexError):
            doc.create_marker(-1)

    def test_invalid_position_ref_creates_no_marker(self):
        doc = TextDocument("abc")
        with pytest.raises(IndexError):
            doc.create_position_ref(1, 10)
        assert doc.live_marker_count == 0

    def test_save_and_load_round_trip(self, tmp_path):
        path = tmp_path / "doc.xml"
        TextDocument("<r>é</r>").save(path)
        assert TextDocument.from_file(path).text == "<r>é</r>"


class TestXmlTree:

    def test_spans_cover_exact_element_text(self, article_xml):
        tree = XmlTree.parse(article_xml)
        sections = [node for node in tree.iter() if node.tag == "sect1"]
        texts = [article_xml[node.start:node.end] for node in sections]
        assert texts == [
            '<sect1 id="a"><title>A</title></sect1>',
            '<sect1 id="b"><title>B</title></sect1>',
            '<sect1 id="c"/>',
        ]

    def test_children_and_attributes(self, article_xml):
        tree = XmlTree.parse(article_xml)
        children = tree.children(tree.root)
        assert [tree.element_type(c) for c in children] == ["sect1", "sect1", "para", "sect1"]
        assert tree.attribute(children[0], "id") == "a"
        assert tree.attribute(children[2], "id") is None
        assert children[0].parent is tree.root

    def test_spans_use_character_offsets(self):
        text = '<r><s n="é">ü</s><s n="x"/></r>'
        tree = XmlTree.parse(text)
        first, second = tree.children(tree.root)
        assert text[slice(*tree.text_span(first))] == '<s n="é">ü</s>'
        assert text[slice(*tree.text_span(second))] == '<s n="x"/>'

    def test_greater_than_inside_attribute_value(self):
        text = '<r><s n="a>b"/><t/></r>'
        tree = XmlTree.parse(text)
        first, second = tree.children(tree.root)
        assert text[first.start:first.end] == '<s n="a>b"/>'
        assert text[second.start:second.end] == '<t/>'

    def test_find_enclosing_node(self, article_xml):
        tree = XmlTree.parse(article_xml)
        assert tree.find_enclosing_node(article_xml.index('<sect1 id="a"')).tag == "article"
        assert tree.find_enclosing_node(article_xml.index("<title>A")).tag == "sect1"
        assert tree.find_enclosing_node(article_xml.index(">A<") + 1).tag == "title"

    def test_find_enclosing_node_outside_root_falls_back_to_root(self, article_xml):
        tree = XmlTree.parse(article_xml)
        assert tree.find_enclosing_node(0) is tree.root
        assert tree.find_enclosing_node(len(article_xml)) is tree.root

    def test_internal_entity_elements_are_not_children(self):
        text = (
            '<!DOCTYPE r [<!ENTITY e "<s id=\'z\'>Z</s>">]>'
            '<r><s id="a">A</s>&e;<s id="b">B</s></r>'
        )
        tree = XmlTree.parse(text)
        children = tree.children(tree.root)
        assert [tree.attribute(c, "id") for c in children] == ["a", "b"]
        assert [text[slice(*tree.text_span(c))] for c in children] == [
            '<s id="a">A</s>',
            '<s id="b">B</s>',
        ]

    def test_malformed_markup_raises_with_location(self):
        with pytest.raises(DocumentParseError) as info:
            XmlTree.parse("<r>\n<a></b>\n</r>")
        assert info.value.line == 2

    def test_empty_text_raises(self):
        with pytest.raises(DocumentParseError):
            XmlTree.parse("")


class TestDocumentTypeName:

    def test_doctype_name(self, article_xml):
        assert document_type_name(article_xml) == "article"

    def test_root_tag_without_doctype(self):
        assert document_type_name("<book><chapter/></book>") == "book"

    def test_namespaced_root_uses_local_name(self):
        assert document_type_name('<d:book xmlns:d="urn:x"/>') == "book"

    def test_malformed_markup_raises(self):
        with pytest.raises(DocumentParseError):
            document_type_name("<book>")

    def test_document_method_delegates(self, article_document):
        assert article_document.document_type_name() == "article"


def test_default_collaborators_satisfy_protocols(article_xml):
    assert isinstance(TextDocument(article_xml), TextBuffer)
    assert isinstance(XmlTree.parse(article_xml), TreeModel)
