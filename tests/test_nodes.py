from __future__ import annotations

import pytest

from soupwrap.create import clone, create_document, create_element, create_fragment, create_text_node
from soupwrap.errors import SoupMishap
from soupwrap.guards import get_node_type
from soupwrap.nodes import (
    after,
    before,
    change_tag_name,
    extract,
    get_child_elements,
    get_children,
    into,
    prepend,
    replace_element,
    safe_string,
    top_element,
    wrap,
)
from soupwrap.select import select
from soupwrap.serialize import to_html


def test_change_tag_name_on_each_variant() -> None:
    html = '<span class="foobar">hello world</span>'
    expected = '<div class="foobar">hello world</div>'
    to_div = change_tag_name("div")

    assert to_div(html) == expected
    assert to_html(to_div(create_element(html))) == expected

    fragment = create_fragment(html)
    assert to_html(to_div(fragment)) == expected
    assert to_html(fragment) == html

    document = create_document(html, "<title>t</title>")
    renamed = to_div(document)
    assert get_node_type(renamed) == "document"
    assert to_html(renamed) == f"<html><head><title>t</title></head><body>{expected}</body></html>"


def test_change_tag_name_is_a_no_op_for_the_same_name() -> None:
    element = create_element("<DIV>x</DIV>")
    html = "<Div class='a'>x</Div>"

    assert change_tag_name("div")(element) is element
    assert change_tag_name("DIV")(html) is html


def test_change_tag_name_preserves_position_in_parent() -> None:
    parent = create_element('<div class="parent"><i>a</i><span class="foobar">hello world</span><b>c</b></div>')
    renamed = change_tag_name("p")(parent.span)

    assert renamed.parent is parent
    assert to_html(parent) == '<div class="parent"><i>a</i><p class="foobar">hello world</p><b>c</b></div>'


def test_change_tag_name_failures() -> None:
    with pytest.raises(SoupMishap, match="'text' node"):
        change_tag_name("div")(create_text_node("text"))
    with pytest.raises(SoupMishap, match="no elements"):
        change_tag_name("div")(create_fragment("only text"))


def test_replace_element() -> None:
    html = '<div class="parent"><span class="foobar">hello world</span></div>'
    only_div = '<div class="parent"><div class="foobar">hello world</div></div>'

    outside = replace_element(create_element(html))(create_element(only_div))
    assert to_html(outside) == only_div

    parent = create_element(html)
    replacement = replace_element(parent.span)('<div class="foobar">hello world</div>')
    assert replacement.parent is parent
    assert to_html(parent) == only_div


def test_replace_element_first_identical_sibling_wins() -> None:
    parent = create_element("<ul><li>a</li><li>a</li></ul>")
    second = parent.find_all("li")[1]

    replace_element(second)("<li>b</li>")

    assert to_html(parent) == "<ul><li>b</li><li>a</li></ul>"


def test_prepend() -> None:
    assert prepend("<b>hi</b> ")("<p>there</p>") == "<p><b>hi</b> there</p>"

    element = create_element("<p>x</p>")
    result = prepend(create_text_node("a "))(element)
    assert to_html(result) == "<p>a x</p>"
    assert to_html(element) == "<p>x</p>"

    document = create_document("<main><p>x</p></main>")
    assert to_html(top_element(prepend("<h1>t</h1>")(document))) == "<main><h1>t</h1><p>x</p></main>"

    with pytest.raises(SoupMishap):
        prepend("<b>x</b>")(create_text_node("text"))


def test_before_and_after_attached_element() -> None:
    parent = create_element("<div><p>x</p></div>")
    paragraph = parent.p

    assert before("<hr>")(paragraph) is paragraph
    assert after("<i>1</i><i>2</i>")(paragraph) is paragraph
    assert to_html(parent) == "<div><hr><p>x</p><i>1</i><i>2</i></div>"


def test_before_and_after_fragment_are_copy_on_write() -> None:
    fragment = create_fragment("<p>x</p>")

    assert to_html(before("<i>a</i>")(fragment)) == "<i>a</i><p>x</p>"
    assert to_html(after("<i>z</i>")(fragment)) == "<p>x</p><i>z</i>"
    assert to_html(fragment) == "<p>x</p>"


def test_before_requires_a_parent() -> None:
    with pytest.raises(SoupMishap, match="No parent element"):
        before("<hr>")(create_element("<p>x</p>"))
    with pytest.raises(SoupMishap, match="No parent element"):
        after("<hr>")("<p>x</p>")


def test_into_with_multiple_nodes() -> None:
    wrapper = '<div class="my-wrapper"></div>'
    indent = "\n\t"
    text = "hello"
    element = "<span>world</span>"
    closeout = "\n"
    html = f"{indent}{text}{element}{closeout}"
    expected = f'<div class="my-wrapper">{html}</div>'

    assert into(wrapper)(indent, text, element, closeout) == expected
    assert into(wrapper)([indent, text, element, closeout]) == expected
    assert to_html(into(create_fragment(wrapper))(indent, text, element, closeout)) == expected
    assert to_html(into(create_element(wrapper))(indent, text, element, closeout)) == expected
    assert to_html(into('<div class="wrapper">')(indent, text, element, closeout)) == (
        f'<div class="wrapper">{html}</div>'
    )

    empty_parent = into()(indent, text, element, closeout)
    assert to_html(empty_parent) == html
    # the two leading text pieces fold into one text node
    assert len(empty_parent.contents) == 3


def test_into_goes_inside_the_first_child_element() -> None:
    parent = create_element('<div class="outer"><p>first</p><p>second</p></div>')
    result = into(parent)("!")

    assert to_html(result) == '<div class="outer"><p>first!</p><p>second</p></div>'
    assert to_html(parent) == '<div class="outer"><p>first</p><p>second</p></div>'


def test_into_document_uses_the_body() -> None:
    document = create_document("")
    result = into(document)("<p>x</p>")

    assert to_html(result) == "<html><head></head><body><p>x</p></body></html>"


def test_into_rejects_text_parents() -> None:
    with pytest.raises(SoupMishap, match="text node"):
        into("just text")("<b>x</b>")
    with pytest.raises(SoupMishap):
        into(create_text_node("t"))("<b>x</b>")


def test_wrap() -> None:
    html = "<span>foobar</span>"
    text = "foobar"
    siblings = "<span>one</span><span>two</span><span>three</span>"
    middling = "<span>one</span>two<span>three</span>"
    wrapper = create_fragment('<div class="wrapper"></div>')

    assert to_html(wrap(html)(clone(wrapper))) == f'<div class="wrapper">{html}</div>'
    assert to_html(wrap(text)(clone(wrapper))) == f'<div class="wrapper">{text}</div>'
    assert to_html(wrap(siblings)(clone(wrapper))) == f'<div class="wrapper">{siblings}</div>'
    assert to_html(wrap(middling)(clone(wrapper))) == f'<div class="wrapper">{middling}</div>'
    assert to_html(wrapper) == '<div class="wrapper"></div>'


def test_get_children() -> None:
    fragment = create_fragment("a<b>c</b> <i>d</i>")

    assert len(get_children(fragment)) == 4
    assert [el.name for el in get_child_elements(fragment)] == ["b", "i"]
    assert [el.name for el in get_child_elements(create_document("<p>1</p><p>2</p>"))] == ["p", "p"]
    assert get_children(create_text_node("t")) == []

    with pytest.raises(SoupMishap, match="Unknown node type"):
        get_children(create_fragment("<!-- c --><b>x</b>"))


def test_top_element() -> None:
    assert top_element(create_fragment("text <b>x</b><i>y</i>")).name == "b"
    assert top_element(create_document("<main>m</main>")).name == "main"
    assert top_element(create_fragment("text only")) is None


def test_extract_collects_removed_elements() -> None:
    extractor = extract()
    result = (
        select('<div><p class="note">a</p><p>b</p><p class="note">c</p></div>')
        .update_all(".note")(extractor)
        .to_container()
    )

    assert result == "<div><p>b</p></div>"
    assert len(extractor) == 2
    assert [to_html(el) for el in extractor.extracted] == ['<p class="note">a</p>', '<p class="note">c</p>']
    assert extract(extractor) is extractor


def test_safe_string() -> None:
    assert safe_string("hi there") == "hi there"
    assert safe_string("<div>hi there</div>") == "hi there"
    assert safe_string("5 is > 4") == "5 is > 4"
    assert safe_string("hi <span>there</span>") == "hi there"
