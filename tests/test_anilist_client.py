import pytest
import requests

from anilist_export.anilist.anilist_client import AniListClient, auth_headers, parse_retry_after
from anilist_export.anilist.errors import AniListRequestError, RateLimitedError
from anilist_export.anilist.fetch import fetch_media_list_entries


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def client():
    c = AniListClient(api_url="https://graphql.example/")
    yield c
    c.close()


def _answer(monkeypatch, client, response):
    sent = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        sent.update(url=url, json=json, headers=headers, timeout=timeout)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(client.session, "post", fake_post)
    return sent


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2", 2.0),
        (" 5 ", 5.0),
        ("1.5", 1.5),
        (None, 1.0),
        ("", 1.0),
        ("soon", 1.0),
        ("-3", 1.0),
        ("nan", 1.0),
        ("inf", 1.0),
        ("1e400", 1.0),
        ("86400", 900.0),
    ],
)
def test_parse_retry_after(value, expected):
    assert parse_retry_after(value) == expected


def test_auth_headers():
    assert auth_headers("tok") == {"Authorization": "Bearer tok"}
    assert auth_headers(None) == {}
    assert auth_headers("") == {}


def test_request_returns_data_block(monkeypatch, client):
    sent = _answer(monkeypatch, client, FakeResponse(payload={"data": {"User": {"id": 1}}}))

    data = client.request("query { x }", {"name": "a"}, {"Authorization": "Bearer t"})

    assert data == {"User": {"id": 1}}
    assert sent["url"] == "https://graphql.example/"
    assert sent["json"] == {"query": "query { x }", "variables": {"name": "a"}}
    assert sent["headers"] == {"Authorization": "Bearer t"}


def test_429_becomes_rate_limited(monkeypatch, client):
    _answer(monkeypatch, client, FakeResponse(status_code=429, headers={"Retry-After": "2"}))

    with pytest.raises(RateLimitedError) as exc_info:
        client.request("q", {})

    assert exc_info.value.retry_after == 2.0


def test_429_without_header_defaults_to_one_second(monkeypatch, client):
    _answer(monkeypatch, client, FakeResponse(status_code=429))

    with pytest.raises(RateLimitedError) as exc_info:
        client.request("q", {})

    assert exc_info.value.retry_after == 1.0


def test_other_http_errors_are_request_errors(monkeypatch, client):
    _answer(monkeypatch, client, FakeResponse(status_code=500, text="oops"))

    with pytest.raises(AniListRequestError) as exc_info:
        client.request("q", {})

    assert exc_info.value.status == 500
    assert not isinstance(exc_info.value, RateLimitedError)


def test_network_errors_are_request_errors(monkeypatch, client):
    _answer(monkeypatch, client, requests.ConnectionError("down"))

    with pytest.raises(AniListRequestError):
        client.request("q", {})


def test_graphql_errors_without_data(monkeypatch, client):
    _answer(
        monkeypatch,
        client,
        FakeResponse(payload={"data": None, "errors": [{"message": "Not Found.", "status": 404}]}),
    )

    with pytest.raises(AniListRequestError, match="Not Found."):
        client.request("q", {})


def test_non_json_body(monkeypatch, client):
    _answer(monkeypatch, client, FakeResponse(payload=ValueError("no json")))

    with pytest.raises(AniListRequestError):
        client.request("q", {})


@pytest.mark.parametrize("header", ["nan", "inf", "1e400"])
def test_non_finite_retry_after_is_retried_after_one_second(monkeypatch, client, header, fake_sleep, sleeps):
    responses = [
        FakeResponse(status_code=429, headers={"Retry-After": header}),
        FakeResponse(payload={"data": {"Page": {"mediaList": [{"id": 1}]}}}),
    ]
    monkeypatch.setattr(client.session, "post", lambda *args, **kwargs: responses.pop(0))

    entries = fetch_media_list_entries(client, 7, sleep=fake_sleep)

    assert entries == [{"id": 1}]
    assert sleeps == [1.0]
