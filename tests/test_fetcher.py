import logging
from unittest import mock

import certifi
import pytest
import requests

from scraper.network.fetcher import FetchResult, PageFetcher
from scraper.utils.config import Config


@pytest.fixture
def config(tmp_path):
    return Config(str(tmp_path / 'config.json'))


def make_response(content=b'<p>x</p>', content_type='text/html', url='https://example.com/'):
    response = mock.Mock()
    response.content = content
    response.url = url
    response.status_code = 200
    response.headers = {'Content-Type': content_type}
    return response


def test_fetch_uses_declared_charset(config):
    session = mock.Mock()
    session.get.return_value = make_response(content_type='text/html; charset="ISO-8859-1"')
    fetcher = PageFetcher(config, session=session)

    result = fetcher.fetch('https://example.com/')

    assert result == FetchResult('https://example.com/', b'<p>x</p>', 'ISO-8859-1', 200)
    session.get.assert_called_once_with('https://example.com/', headers=None, timeout=30)


def test_fetch_defaults_to_configured_encoding(config):
    session = mock.Mock()
    session.get.return_value = make_response(content_type='text/html')
    assert PageFetcher(config, session=session).fetch('https://example.com/').encoding == 'utf-8'

    config.set('parser.default_encoding', 'windows-1252')
    config.set('network.timeout', 5)
    fetcher = PageFetcher(config, session=session)
    assert fetcher.fetch('https://example.com/', headers={'X-A': '1'}).encoding == 'windows-1252'
    session.get.assert_called_with('https://example.com/', headers={'X-A': '1'}, timeout=5)


def test_fetch_errors_are_logged_and_raised(config, caplog):
    session = mock.Mock()
    response = make_response()
    response.raise_for_status.side_effect = requests.HTTPError('404 Client Error')
    session.get.return_value = response
    fetcher = PageFetcher(config, session=session)

    with caplog.at_level(logging.ERROR, logger='scraper.network.fetcher'):
        with pytest.raises(requests.HTTPError):
            fetcher.fetch('https://example.com/missing')

    assert 'Error fetching https://example.com/missing' in caplog.text


def test_session_configuration(config):
    fetcher = PageFetcher(config)
    adapter = fetcher.session.get_adapter('https://example.com/')

    assert adapter.max_retries.total == 3
    assert 503 in adapter.max_retries.status_forcelist
    assert fetcher.session.headers['User-Agent'] == 'html-scraper/1.0'
    assert fetcher.session.verify == certifi.where()
    fetcher.close()


def test_session_follows_config(config):
    config.set('network.max_retries', 5)
    config.set('network.user_agent', 'custom-agent')
    fetcher = PageFetcher(config)

    assert fetcher.session.get_adapter('http://example.com/').max_retries.total == 5
    assert fetcher.session.headers['User-Agent'] == 'custom-agent'
    fetcher.close()


def test_close_closes_session(config):
    session = mock.Mock()
    PageFetcher(config, session=session).close()
    session.close.assert_called_once_with()
