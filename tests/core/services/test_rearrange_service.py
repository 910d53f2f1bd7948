import pytest

from rearrange_toolkit.core.document import TextDocument
from rearrange_toolkit.core.path_config import PathConfigStore
from rearrange_toolkit.core.services import OperationResult, RearrangeEngine, RearrangeService


def test_cut_then_paste_moves_nodes_in_chosen_order(article_document, article_names):
    offered = []

    def arrange(names):
        offered.append(list(names))
        return ["c", "a"]

    service = RearrangeService(article_document, name_properties=article_names, arrange_names=arrange)

    cut = service.cut_at_cursor(article_document.text.index("<para>"))

    assert isinstance(cut, OperationResult)
    assert cut.success is True
    assert offered == [["a", "b", "c"]]
    assert cut.details["names"] == ["c", "a"]
    assert cut.details["parent"] == "article"
    assert service.can_paste() is True

    cursor = article_document.text.index("</article>")
    pasted = service.paste_at_cursor(cursor)

    assert pasted.success is True
    assert pasted.details["names"] == ["c", "a"]
    assert article_document.text == (
        '<?xml version="1.0"?>\n'
        '<!DOCTYPE article SYSTEM "article.dtd">\n'
        '<article>\n'
        '\n'
        '<sect1 id="b"><title>B</title></sect1>\n'
        '<para>text</para>\n'
        '\n'
        '<sect1 id="c"/>\n'
        '<sect1 id="a"><title>A</title></sect1>\n'
        '</article>\n'
    )
    assert article_document.text[cursor:pasted.details["end"]] == (
        '<sect1 id="c"/>\n<sect1 id="a"><title>A</title></sect1>\n'
    )
    assert service.can_paste() is False
    assert article_document.live_marker_count == 0


def test_paste_with_empty_history_fails_without_editing(article_document, article_xml):
    service = RearrangeService(article_document)

    result = service.paste_at_cursor(10)

    assert result.success is False
    assert result.details["reason"] == "empty_history"
    assert "Nothing to paste" in result.message
    assert article_document.text == article_xml


def test_cut_with_nothing_kept_is_reported(article_document, article_names, article_xml):
    service = RearrangeService(article_document, name_properties=article_names, arrange_names=lambda _n: [])

    result = service.cut_at_cursor(article_xml.index("<para>"))

    assert result.success is False
    assert result.details["reason"] == "nothing_kept"
    assert article_document.text == article_xml
    assert service.can_paste() is False


def test_cut_without_configuration_is_reported(article_document, article_xml):
    service = RearrangeService(article_document)

    result = service.cut_at_cursor(article_xml.index("<para>"))

    assert result.success is False
    assert result.details["count"] == 0


def test_cut_inside_child_uses_that_child_as_parent(article_document, article_names, article_xml):
    service = RearrangeService(article_document, name_properties=article_names)

    result = service.cut_at_cursor(article_xml.index("<title>A"))

    assert result.success is False
    assert result.details["parent"] == "sect1"
    assert article_document.text == article_xml


@pytest.mark.parametrize("command", ["cut_at_cursor", "set_name_property"])
def test_malformed_document_is_reported(command):
    text = "<article><sect1 id='a'></article>"
    document = TextDocument(text)
    service = RearrangeService(document, choose_attribute_name=lambda _n: "id")

    result = getattr(service, command)(3)

    assert result.success is False
    assert result.details["reason"] == "parse_error"
    assert document.text == text


def test_set_name_property_updates_store_and_notifies(article_document, article_names, article_xml):
    asked = []
    saved = []

    def choose(node):
        asked.append((node.tag, dict(node.attrib)))
        return "role"

    service = RearrangeService(
        article_document,
        name_properties=article_names,
        choose_attribute_name=choose,
        on_config_changed=saved.append,
    )

    result = service.set_name_property(article_xml.index("text</para>"))

    assert result.success is True
    assert result.details == {"document_type": "article", "element_type": "para", "attribute": "role"}
    assert asked == [("para", {})]
    assert service.name_properties.get_path(["article", "para"]) == "role"
    assert service.name_properties.get_path(["article", "sect1"]) == "id"
    assert saved == [service.name_properties]


def test_set_name_property_cancelled(article_document, article_names, article_xml):
    saved = []
    service = RearrangeService(
        article_document,
        name_properties=article_names,
        choose_attribute_name=lambda _node: None,
        on_config_changed=saved.append,
    )

    result = service.set_name_property(article_xml.index("text</para>"))

    assert result.success is False
    assert result.details["reason"] == "cancelled"
    assert saved == []
    assert service.name_properties == article_names


def test_set_name_then_cut_uses_new_property():
    text = '<book><chapter label="2"/><chapter label="1"/></book>'
    document = TextDocument(text)
    service = RearrangeService(
        document,
        choose_attribute_name=lambda _node: "label",
        arrange_names=lambda names: sorted(names),
    )

    assert service.set_name_property(text.index('label="2"')).success is True
    assert service.cut_at_cursor(text.index("<chapter")).details["names"] == ["1", "2"]
    assert document.text == "<book></book>"

    service.paste_at_cursor(len("<book>"))
    assert document.text == '<book><chapter label="1"/>\n<chapter label="2"/>\n</book>'


def test_service_uses_supplied_engine(article_document):
    engine = RearrangeEngine(article_document, name_properties=PathConfigStore())
    service = RearrangeService(article_document, engine=engine)
    assert service.engine is engine
    assert service.document is article_document


def test_entity_expanded_nodes_are_not_offered_or_cut():
    text = (
        '<!DOCTYPE r [<!ENTITY e "<s id=\'z\'>Z</s>">]>'
        '<r><s id="a">A</s>&e;<s id="b">B</s></r>'
    )
    document = TextDocument(text)
    offered = []

    def arrange(names):
        offered.append(list(names))
        return ["z"]

    service = RearrangeService(
        document,
        name_properties=PathConfigStore().set_path(["r", "s"], "id"),
        arrange_names=arrange,
    )

    result = service.cut_at_cursor(text.index("<r>") + 1)

    assert offered == [["a", "b"]]
    assert result.success is False
    assert result.details["reason"] == "nothing_kept"
    assert document.text == text
    assert service.can_paste() is False


def test_paste_outside_document_is_reported_and_keeps_batch(article_document, article_names):
    service = RearrangeService(article_document, name_properties=article_names)
    assert service.cut_at_cursor(article_document.text.index("<para>")).success is True
    before = article_document.text

    result = service.paste_at_cursor(len(before) + 50)

    assert result.success is False
    assert result.details["reason"] == "invalid_position"
    assert article_document.text == before
    assert service.can_paste() is True
