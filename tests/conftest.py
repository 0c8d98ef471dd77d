import pytest

from scraper import Document


LIST_HTML = "<ul class='x'><li id='a'>1</li><li>2</li></ul>"

PAGE = (
    "<html><head><title>Listing</title></head><body>"
    "<div class=\"item\" id=\"first\"><a href=\"/a\">A</a></div>"
    "<div class=\"item special\"><a href=\"/b\">B</a><a>C</a></div>"
    "<ul><li>1</li><li>2</li><li>3</li></ul>"
    "</body></html>"
)


@pytest.fixture
def list_document():
    return Document.from_string(LIST_HTML)


@pytest.fixture
def page():
    return Document.from_string(PAGE)


def texts(elements):
    return [element.text_content for element in elements]
