import pytest

from mapsimport.vendors import google_places

BASE_URL = "https://places.example.com/api"


class DummyResponse:
    def __init__(self, status_code=200, payload=None, headers=None, content=b""):
        self.status_code = status_code
        self._payload = payload or {}
        self.headers = headers or {}
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise RuntimeError("http error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []

    def get(self, url, params=None, timeout=None, **kwargs):
        self.calls.append((url, params, timeout, kwargs))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_places, "_SESSION", session)
    return session


def test_nearby_search_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "results": [{"place_id": "a"}]})
    payload = google_places.nearby_search(1.3521, 103.8198, 100, api_key="key", base_url=BASE_URL)
    assert payload["results"][0]["place_id"] == "a"
    url, params, timeout, _ = patch_session.calls[0]
    assert url == f"{BASE_URL}/nearbysearch/json"
    assert params["location"] == "1.3521,103.8198"
    assert params["radius"] == 100
    assert "keyword" not in params
    assert timeout == 10


def test_nearby_search_zero_results_is_not_an_error(patch_session):
    patch_session.response = DummyResponse(payload={"status": "ZERO_RESULTS", "results": []})
    payload = google_places.nearby_search(0, 0, 100, api_key="key", base_url=BASE_URL)
    assert payload["results"] == []


def test_text_search_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "results": []})
    payload = google_places.text_search("Test Cafe", api_key="key", base_url=BASE_URL, place_type="establishment")
    assert payload["status"] == "OK"
    url, params, timeout, _ = patch_session.calls[0]
    assert "textsearch" in url
    assert params["query"] == "Test Cafe"
    assert params["type"] == "establishment"
    assert timeout == 10


def test_text_search_error_status(patch_session, caplog):
    patch_session.response = DummyResponse(payload={"status": "INVALID_REQUEST", "error_message": "bad"})
    with caplog.at_level("ERROR"):
        with pytest.raises(google_places.GooglePlacesError):
            google_places.text_search("pizza", api_key="key", base_url=BASE_URL)
    assert "INVALID_REQUEST" in " ".join(caplog.messages)


def test_place_details_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "result": {"name": "Acme"}})
    result = google_places.place_details("pid", api_key="key", base_url=BASE_URL)
    assert result["name"] == "Acme"
    _, params, _, _ = patch_session.calls[0]
    assert params["place_id"] == "pid"
    assert "geometry" in params["fields"]
    assert "editorial_summary" in params["fields"]


def test_place_details_error(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OVER_QUERY_LIMIT", "error_message": "limit"})
    with pytest.raises(google_places.GooglePlacesError):
        google_places.place_details("pid", api_key="key", base_url=BASE_URL)


def test_fetch_photo_does_not_follow_redirects(patch_session):
    patch_session.response = DummyResponse(status_code=302, headers={"Location": "https://cdn.example.com/p.jpg"})
    response = google_places.fetch_photo("ref123", api_key="key", base_url=BASE_URL, max_width=400)
    assert response.status_code == 302
    url, params, _, kwargs = patch_session.calls[0]
    assert url == f"{BASE_URL}/photo"
    assert params["photo_reference"] == "ref123"
    assert params["maxwidth"] == 400
    assert kwargs["allow_redirects"] is False
