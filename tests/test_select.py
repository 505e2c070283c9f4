from __future__ import annotations

import pytest
from bs4 import NavigableString

from soupwrap.attributes import add_class, get_class_list
from soupwrap.create import create_document, create_element, create_fragment
from soupwrap.errors import SoupMishap
from soupwrap.nodes import change_tag_name
from soupwrap.select import NodeSelector, select
from soupwrap.serialize import to_html

LINES = """
    <div class="wrapper">
      <span class="line line-1">1</span>
      <span class="line line-2">2</span>
      <span class="line line-3">3</span>
    </div>
    """


def test_type_reports_the_origin() -> None:
    assert select("<p>x</p>").type() == "html"
    assert select(create_fragment("<p>x</p>")).type() == "fragment"
    assert select(create_document("<p>x</p>")).type() == "document"
    assert select(create_element("<p>x</p>")).type() == "element"


def test_select_rejects_text_and_nodes() -> None:
    with pytest.raises(SoupMishap, match="invalid node type: text"):
        select(NavigableString("x"))
    with pytest.raises(SoupMishap, match="invalid node type: node"):
        select(None)


def test_find_first() -> None:
    selection = select(LINES)

    assert selection.find_first(".line-2").get_text() == "2"
    assert selection.find_first(".missing") is None
    with pytest.raises(SoupMishap, match="not found"):
        selection.find_first(".missing", "not found")


def test_find_all() -> None:
    assert len(select(LINES).find_all(".line")) == 3
    assert select(LINES).find_all(".nothing") == []
    assert [el.name for el in select("<p>a</p> <p>b</p>").find_all()] == ["p", "p"]
    assert [el.name for el in select(create_document("<p>a</p><i>b</i>")).find_all()] == ["p", "i"]


def test_update_all_renames_within_parent() -> None:
    html = '<div class="wrapper"><span class="line">1</span></div>'
    result = select(html).update_all(".line")(change_tag_name("div")).to_container()

    assert result == '<div class="wrapper"><div class="line">1</div></div>'


def test_update_all_keeps_surrounding_whitespace() -> None:
    to_div = change_tag_name("div")

    assert select(LINES).update_all(".line")(to_div).to_container() == LINES.replace("span", "div")

    updated_fragment = select(create_fragment(LINES)).update_all(".line")(to_div).to_container()
    assert to_html(updated_fragment) == LINES.replace("span", "div")

    updated_element = select(create_element(LINES.strip())).update_all(".line")(to_div).to_container()
    assert to_html(updated_element) == LINES.strip().replace("span", "div")


def test_update_then_update_all_chain() -> None:
    table = (
        select(LINES)
        .update(".wrapper")(change_tag_name("table"))
        .update_all(".line")(change_tag_name("tr"))
        .to_container()
    )

    assert table == LINES.replace('<div class="wrapper">', '<table class="wrapper">').replace(
        "</div>", "</table>"
    ).replace("span", "tr")


def test_update_all_passes_index_and_total() -> None:
    seen = []

    def record(el, idx, total):
        seen.append((el.get_text(), idx, total))
        return el

    selection = select(LINES)
    selection.update_all(".line")(record)

    assert seen == [("1", 0, 3), ("2", 1, 3), ("3", 2, 3)]
    assert len(seen) == len(selection.find_all(".line"))


def test_callbacks_taking_element_and_index() -> None:
    numbered = select('<p class="a">1</p><p class="a">2</p>').update_all(".a")(
        lambda el, idx: add_class(f"n{idx}")(el)
    )
    assert numbered.to_container() == '<p class="a n0">1</p><p class="a n1">2</p>'

    single = select("<div><p>1</p></div>").update("p")(lambda el, idx: add_class(f"n{idx}")(el))
    assert single.to_container() == '<div><p class="n0">1</p></div>'

    seen = []
    select(LINES).update_all(".line")(lambda *args: seen.append(len(args)) or args[0])
    assert seen == [3, 3, 3]


def test_nested_matches_update_the_outer_element_only() -> None:
    html = '<div class="a"><div class="a">x</div></div>'

    result = select(html).update_all(".a")(change_tag_name("section")).to_container()

    assert result == '<section class="a"><div class="a">x</div></section>'


def test_update_all_visits_each_match_once() -> None:
    visited = []
    for sel in (".line", "span", ".line-2", ".nope", None):
        visited.clear()
        selection = select(LINES)
        selection.update_all(sel)(lambda el: visited.append(el) or el)
        assert len(visited) == len(select(LINES).find_all(sel))


def test_update_all_wraps_callback_errors() -> None:
    def explode(el):
        raise ValueError("nope")

    with pytest.raises(SoupMishap) as excinfo:
        select(LINES).update_all(".line")(explode)

    assert "nope" in str(excinfo.value)
    assert "0 idx, 3 elements" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert excinfo.value.trace == ["ValueError"]


def test_update_all_rejects_invalid_return_values() -> None:
    with pytest.raises(SoupMishap, match="invalid"):
        select(LINES).update_all(".line")(lambda el: "<div>string</div>")


def test_update_callback_results() -> None:
    html = '<div><p class="a">x</p><i>y</i></div>'

    removed = select(html).update("i")(lambda el: False).to_container()
    assert removed == '<div><p class="a">x</p></div>'

    mutated = select(html).update("p")(lambda el: el.attrs.update({"id": "n"})).to_container()
    assert mutated == '<div><p class="a" id="n">x</p><i>y</i></div>'

    replaced = select(html).update("p")(add_class("b")).to_container()
    assert get_class_list(select(replaced).find_first("p")) == ["a", "b"]


def test_update_callback_gets_a_clone() -> None:
    root = create_fragment("<p>x</p>")
    original = root.p
    received = []

    select(root).update("p")(lambda el: received.append(el) or el)

    assert received[0] is not original
    assert original.parent is None
    assert to_html(root) == "<p>x</p>"


def test_update_without_selector_uses_the_root() -> None:
    assert select("<p>x</p>").update()(change_tag_name("div")).to_container() == "<div>x</div>"

    element = create_element("<p>x</p>")
    handle = select(element).update()(change_tag_name("section"))
    assert to_html(handle.to_container()) == "<section>x</section>"
    assert to_html(element) == "<p>x</p>"

    with pytest.raises(SoupMishap, match="more than a single element"):
        select("<p>a</p><p>b</p>").update()(change_tag_name("div"))
    with pytest.raises(SoupMishap, match="no element"):
        select("just text").update()(change_tag_name("div"))


def test_update_missing_target() -> None:
    html = "<p>x</p>"

    assert select(html).update(".missing")(change_tag_name("div")).to_container() == html
    with pytest.raises(SoupMishap, match='The selection ".missing" was not found'):
        select(html).update(".missing", True)(change_tag_name("div"))
    with pytest.raises(SoupMishap, match="custom message"):
        select(html).update(".missing", "custom message")(change_tag_name("div"))


def test_removing_the_root_element_leaves_an_empty_fragment() -> None:
    handle = select(create_element("<p>x</p>")).update()(lambda el: False)

    assert handle.type() == "fragment"
    assert to_html(handle.to_container()) == ""


def test_map_all_is_non_destructive() -> None:
    root = create_fragment("<ul><li>a</li><li>b</li></ul>")
    texts = select(root).map_all("li")(lambda el: el.get_text())
    renamed = select(root).map_all("li")(change_tag_name("p"))

    assert texts == ["a", "b"]
    assert [to_html(el) for el in renamed] == ["<p>a</p>", "<p>b</p>"]
    assert to_html(root) == "<ul><li>a</li><li>b</li></ul>"


def test_filter_removes_matches() -> None:
    html = '<ul><li class="x">a</li><li>b</li><li class="x">c</li></ul>'
    assert select(html).filter(".x").to_container() == "<ul><li>b</li></ul>"


def test_handles_are_new_values_over_the_same_root() -> None:
    root = create_fragment('<div><p class="x">a</p></div>')
    first = select(root)
    second = first.filter(".x")

    assert isinstance(second, NodeSelector)
    assert second is not first
    assert second.root is first.root
    assert to_html(root) == "<div></div>"


def test_document_root_stays_a_document() -> None:
    document = create_document('<main><p class="x">a</p></main>')
    result = select(document).update_all(".x")(change_tag_name("span")).to_container()

    assert result is document
    assert to_html(result) == '<html><head></head><body><main><span class="x">a</span></main></body></html>'
