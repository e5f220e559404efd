import argparse

import pytest

from mapsimport.core.config import ConfigError
from mapsimport.core.errors import PlaceNotFoundError
from mapsimport.jobs import resolve_link
from mapsimport.models import ResolvedPlace

PLACE = ResolvedPlace(place_id="pid", name="Test Cafe", address="Main", latitude=1.3521, longitude=103.8198)


class DummyResolver:
    def __init__(self, outcome=PLACE):
        self.outcome = outcome

    def resolve(self, url):
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _use_resolver(monkeypatch, resolver):
    monkeypatch.setattr(
        resolve_link.MapsLinkResolver, "from_settings", classmethod(lambda cls, settings=None: resolver)
    )


def test_run_resolve_job_returns_payload(monkeypatch):
    _use_resolver(monkeypatch, DummyResolver())
    payload = resolve_link.run_resolve_job(url="https://maps.app.goo.gl/abc")
    assert payload["name"] == "Test Cafe"
    assert payload["longitude"] == "103.8198"


def test_run_resolve_job_imports_when_country_given(monkeypatch):
    _use_resolver(monkeypatch, DummyResolver())
    imported = []

    def fake_import(payload, country_id):
        imported.append((payload["place_id"], country_id))
        return {"id": 1, **payload}

    monkeypatch.setattr(resolve_link, "import_restaurant", fake_import)

    result = resolve_link.run_resolve_job(url="https://maps.app.goo.gl/abc", country_id=4)

    assert imported == [("pid", 4)]
    assert result["id"] == 1


def test_build_parser():
    parser = resolve_link.build_parser()
    args = parser.parse_args(["https://maps.app.goo.gl/abc", "--country-id", "12"])
    assert isinstance(parser, argparse.ArgumentParser)
    assert args.url == "https://maps.app.goo.gl/abc"
    assert args.country_id == 12


def test_main_exit_codes(monkeypatch):
    _use_resolver(monkeypatch, DummyResolver(PlaceNotFoundError()))
    with pytest.raises(SystemExit) as excinfo:
        resolve_link.main(["https://maps.app.goo.gl/abc"])
    assert excinfo.value.code == 1

    def missing_config(cls, settings=None):
        raise ConfigError("missing")

    monkeypatch.setattr(resolve_link.MapsLinkResolver, "from_settings", classmethod(missing_config))
    with pytest.raises(SystemExit) as excinfo:
        resolve_link.main(["https://maps.app.goo.gl/abc"])
    assert excinfo.value.code == 2


def test_main_prints_json(monkeypatch, capsys):
    _use_resolver(monkeypatch, DummyResolver())
    resolve_link.main(["https://maps.app.goo.gl/abc"])
    assert '"name": "Test Cafe"' in capsys.readouterr().out
