from scraper import Comment, Document, Element, Text
from scraper.html.parser.constants import ROOT_TAG
from scraper.html.parser.tokenizer import Tokenizer
from scraper.html.parser.tree_builder import TreeBuilder

from .conftest import texts


def tags(nodes):
    return [node.tag_name for node in nodes]


def test_root_is_synthetic():
    root = TreeBuilder().build(Tokenizer('<p>x</p>'))
    assert root.tag_name == ROOT_TAG
    assert root.is_root
    assert root.parent_node is None
    assert tags(root.children) == ['p']


def test_unclosed_paragraphs_are_closed_by_the_next_one():
    doc = Document.from_string('<div><p>a<p>b</div>')
    (div,) = doc.root.children
    assert tags(div.children) == ['p', 'p']
    assert texts(div.children) == ['a', 'b']
    first, second = div.children
    assert first.next_sibling is second
    assert first.parent_node is div and second.parent_node is div


def test_block_element_closes_paragraph_but_inline_does_not():
    doc = Document.from_string('<p>a<b>b</b><div>c</div>')
    assert tags(doc.root.children) == ['p', 'div']
    assert tags(doc.root.children[0].children) == ['b']


def test_void_elements_are_not_pushed():
    doc = Document.from_string('<p>a<br>b<img src="x.png">c</p>')
    (p,) = doc.root.children
    assert [node.node_name for node in p.child_nodes] == ['#text', 'BR', '#text', 'IMG', '#text']
    assert not p.children[0].has_child_nodes()


def test_self_closing_non_void_element_is_empty():
    doc = Document.from_string('<div/><span>x</span>')
    assert tags(doc.root.children) == ['div', 'span']
    assert not doc.root.children[0].has_child_nodes()


def test_stray_end_tag_is_ignored_and_text_merged():
    doc = Document.from_string('<div>a</span>b</div>')
    (div,) = doc.root.children
    assert len(div.child_nodes) == 1
    assert div.child_nodes[0].data == 'ab'
    assert '</span> has no open element, ignored' in doc.parse_errors


def test_end_tag_closes_open_descendants():
    doc = Document.from_string('<div><span>a</div>b')
    div, text = doc.root.child_nodes
    assert isinstance(text, Text) and text.data == 'b'
    assert tags(div.children) == ['span']
    assert '<span> closed by </div>' in doc.parse_errors


def test_list_items_close_each_other():
    doc = Document.from_string('<ul><li>1<li>2</ul>')
    (ul,) = doc.root.children
    assert texts(ul.children) == ['1', '2']


def test_nested_lists():
    doc = Document.from_string('<ul><li>a<ul><li>b</ul><li>c</ul>')
    (outer,) = doc.root.children
    assert tags(outer.children) == ['li', 'li']
    first, last = outer.children
    assert tags(first.children) == ['ul']
    assert first.text_content == 'ab'
    assert last.text_content == 'c'


def test_table_rows_and_cells():
    doc = Document.from_string('<table><tr><td>1<td>2<tr><td>3</table>')
    (table,) = doc.root.children
    rows = table.children
    assert tags(rows) == ['tr', 'tr']
    assert texts(rows[0].children) == ['1', '2']
    assert texts(rows[1].children) == ['3']


def test_definition_lists():
    doc = Document.from_string('<dl><dt>term<dd>one<dd>two</dl>')
    (dl,) = doc.root.children
    assert tags(dl.children) == ['dt', 'dd', 'dd']


def test_unclosed_elements_stay_in_tree():
    doc = Document.from_string('<div><span>x')
    (div,) = doc.root.children
    assert div.children[0].text_content == 'x'
    assert len([error for error in doc.parse_errors if 'end of input' in error]) == 2


def test_doctype_is_recorded_once():
    doc = Document.from_string('<!doctype html><html></html><!DOCTYPE other>')
    assert doc.doctype == 'html'
    assert tags(doc.root.children) == ['html']


def test_comments_are_attached():
    doc = Document.from_string('<div><!-- c --></div>')
    (comment,) = doc.root.children[0].child_nodes
    assert isinstance(comment, Comment)
    assert comment.data == ' c '


def test_whitespace_text_is_kept():
    doc = Document.from_string('<div> </div>')
    assert doc.root.children[0].child_nodes[0].data == ' '


def test_parent_child_links_are_consistent():
    doc = Document.from_string(
        '<html><body><div id=a><p>1<p>2<!--c--><ul><li>x<li>y</ul></div>tail</body></html>'
    )
    for node in doc.root.iter_descendants():
        parent = node.parent_node
        assert isinstance(parent, Element)
        siblings = parent.child_nodes
        index = [i for i, sibling in enumerate(siblings) if sibling is node]
        assert len(index) == 1
        index = index[0]
        assert node.previous_sibling is (siblings[index - 1] if index > 0 else None)
        assert node.next_sibling is (siblings[index + 1] if index + 1 < len(siblings) else None)


def test_deep_nesting_does_not_recurse():
    depth = 5000
    doc = Document.from_string('<div>' * depth + 'x')
    assert len(doc) == depth
    assert doc.text_content == 'x'
    assert doc.outer_html == '<div>' * depth + 'x' + '</div>' * depth
