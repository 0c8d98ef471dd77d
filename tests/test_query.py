from concurrent.futures import ThreadPoolExecutor

import pytest

from scraper import Document, ParseError, XPathParseError

from .conftest import PAGE, texts


def test_list_example(list_document):
    items = list_document.get_elements_by_tag_name('li')
    assert texts(items) == ['1', '2']
    assert list_document.get_element_by_id('a') is items[0]
    assert list_document.get_elements_by_class_name('x')[0].tag_name == 'ul'
    assert texts(list_document.get_elements_by_xpath('//ul/li[2]')) == ['2']
    assert list_document.title == ''


def test_tag_lookup(page):
    assert texts(page.get_elements_by_tag_name('A')) == ['A', 'B', 'C']
    assert page.get_elements_by_tag_name('table') == []
    assert [element.tag_name for element in page.get_elements_by_tag_name('*')] == [
        'html', 'head', 'title', 'body', 'div', 'a', 'div', 'a', 'a', 'ul', 'li', 'li', 'li',
    ]
    assert page.by_tag('li') == page.get_elements_by_tag_name('li')


def test_lookups_are_in_document_order():
    doc = Document.from_string('<b id=1></b><div><b id=2><b id=3></b></b></div><b id=4></b>')
    assert [element.id for element in doc.get_elements_by_tag_name('b')] == ['1', '2', '3', '4']
    assert [element.id for element in doc.get_elements_by_xpath('//b')] == ['1', '2', '3', '4']


def test_class_lookup():
    doc = Document.from_string(
        '<p class="a a">1</p><p class="A">2</p><p class="item-x">3</p><p class=" b  a ">4</p>'
    )
    assert texts(doc.get_elements_by_class_name('a')) == ['1', '4']
    assert texts(doc.get_elements_by_class_name('A')) == ['2']
    assert doc.get_elements_by_class_name('item') == []


def test_class_lookup_on_page(page):
    assert len(page.by_class('item')) == 2
    assert page.by_class('special')[0].get_elements_by_tag_name('a')[1].text_content == 'C'


def test_id_lookup():
    doc = Document.from_string('<p id="x">first</p><p id="x">second</p><p id="">empty</p>')
    assert doc.get_element_by_id('x').text_content == 'first'
    assert doc.get_element_by_id('missing') is None
    assert doc.get_element_by_id('') is None


def test_results_are_copies(page):
    page.get_elements_by_tag_name('li').clear()
    page.get_elements_by_class_name('item').append(None)
    page.get_elements_by_tag_name('*').pop()
    assert len(page.get_elements_by_tag_name('li')) == 3
    assert len(page.get_elements_by_class_name('item')) == 2
    assert len(page.get_elements_by_tag_name('*')) == 13


@pytest.mark.parametrize('expression, expected', [
    ('//a', ['A', 'B', 'C']),
    ('/html/body/div/a', ['A', 'B', 'C']),
    ('/html/head/title', ['Listing']),
    ('html/body/ul/li', ['1', '2', '3']),
    ('//div[@class="item"]', ['A']),
    ("//div[contains(@class,'special')]/a", ['B', 'C']),
    ('//a[@href]', ['A', 'B']),
    ("//a[@href='/b']", ['B']),
    ('//li[2]', ['2']),
    ('//li[last()]', ['3']),
    ('//div/a[1]', ['A', 'B']),
    ('//div/a[2]', ['C']),
    ('//div[2]/a[1]', ['B']),
    ("//a[text()='C']", ['C']),
    ("//li[contains(text(), '3')]", ['3']),
    ("//*[@id='first']", ['A']),
    ('//ul/./li[1]', ['1']),
    ('child::html/child::body/child::ul/li', ['1', '2', '3']),
    ('//body/*[3]/*', ['1', '2', '3']),
    ('//table', []),
    ('//li[4]', []),
    ('//li[0]', []),
    ("//a[contains(@title, '')]", ['A', 'B', 'C']),
    ("//a[contains(@title, 'x')]", []),
    ("//div[contains(@class, '')]/a[1]", ['A', 'B']),
    ('/body', []),
])
def test_xpath(page, expression, expected):
    assert texts(page.get_elements_by_xpath(expression)) == expected


def test_xpath_parent_step(page):
    (body,) = page.get_elements_by_xpath('//ul/..')
    assert body.tag_name == 'body'
    assert page.get_elements_by_xpath('/html/..') == []


def test_single_xpath_result(page):
    assert page.get_element_by_xpath('//li').text_content == '1'
    assert page.get_element_by_xpath('//table') is None


def test_relative_xpath_from_element(page):
    first = page.get_element_by_id('first')
    assert texts(first.xpath('a')) == ['A']
    assert texts(first.xpath('./a')) == ['A']
    assert first.xpath('..')[0].tag_name == 'body'
    assert texts(first.xpath('../ul/li[1]')) == ['1']
    assert texts(first.xpath('//li')) == ['1', '2', '3']
    assert first.xpath('li') == []


def test_descendant_steps_do_not_repeat_results():
    doc = Document.from_string('<div><div><p>x</p></div><p>y</p></div>')
    assert texts(doc.get_elements_by_xpath('//div//p')) == ['x', 'y']
    assert len(doc.get_elements_by_xpath('//div//div/p')) == 1


@pytest.mark.parametrize('expression, construct', [
    ('following-sibling::a', 'following-sibling::'),
    ('//a/@href', '@'),
    ('//li[position()=1]', 'position()'),
    ('//a[@href and @title]', 'and'),
    ('//a | //b', '|'),
    ("//a[@href='x]", "'x]"),
    ('', ''),
    ('   ', '   '),
    ('/', '/'),
    ('//li[1.5]', '1.5'),
    ('//text()', 'text()'),
    ('//li[', '['),
    ('//a[@href=1]', '1'),
    ('//.', '//.'),
])
def test_unsupported_xpath_raises(page, expression, construct):
    with pytest.raises(XPathParseError) as excinfo:
        page.get_elements_by_xpath(expression)
    assert excinfo.value.construct == construct
    assert excinfo.value.expression == expression
    assert isinstance(excinfo.value, ParseError)
    assert isinstance(excinfo.value, ValueError)


def test_xpath_error_message_names_the_construct(page):
    with pytest.raises(XPathParseError, match="unsupported axis 'ancestor::'"):
        page.get_elements_by_xpath('//li/ancestor::ul')


def test_concurrent_queries():
    doc = Document.from_string(PAGE * 20)

    def query(index):
        if index % 3 == 0:
            return len(doc.get_elements_by_xpath('//div/a[1]'))
        if index % 3 == 1:
            return len(doc.get_elements_by_tag_name('li'))
        return len(doc.get_elements_by_class_name('item'))

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(query, range(60)))

    assert results == [40, 60, 40] * 20
