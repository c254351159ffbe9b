"""Shared fixtures for the boundary API tests."""

import json

import pytest
import requests

from app import create_app
from boundary_api.cache_service import CacheService
from boundary_api.config import ServerConfig
from boundary_api.datasets import DatasetDescriptor, DownloadResource

COUNTRIES_URL = "https://example.test/countries.geojson"
STATES_URL = "https://example.test/states.geojson"
COUNTIES_URL = "https://example.test/counties.geojson"


def feature(props, bbox=None):
    f = {
        "type": "Feature",
        "properties": props,
        "geometry": {"type": "Point", "coordinates": [0.0, 0.0]},
    }
    if bbox is not None:
        f["bbox"] = bbox
    return f


def collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


COUNTRIES = collection(
    feature({"ISO_A2": "US", "NAME": "United States", "POP_EST": 328239523}, bbox=[-171.8, 18.9, -66.9, 71.4]),
    feature({"ISO_A2": "CA", "NAME": "Canada"}),
    feature({"iso_a2": "FR", "ADMIN": "France"}),
)

STATES = collection(
    feature({"iso_a2": "US", "iso_3166_2": "US-CA", "name": "California"}),
    feature({"iso_a2": "US", "iso_3166_2": "US-TX", "name": "Texas"}),
    feature({"iso_a2": "CA", "iso_3166_2": "CA-ON", "name": "Ontario"}),
    # no country code, only the compound region code
    feature({"iso_3166_2": "US-NV", "name": "Nevada"}),
)

COUNTIES = collection(
    feature({"ISO_A2": "US", "STUSPS": "CA", "GEOID": "06037", "NAME": "Los Angeles"}),
    feature({"ISO_A2": "US", "STUSPS": "TX", "GEOID": "48201", "NAME": "Harris"}),
    feature({"iso_a2": "US", "iso_3166_2": "US-CA", "FIPS": "06075", "name": "San Francisco"}),
    feature({"ISO_A2": "MX", "STUSPS": "CA", "NAME": "Not in the US"}),
)


class FakeResponse:
    def __init__(self, status_code=200, body=b"", reason=None):
        self.status_code = status_code
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode("utf-8")
        self.content = body
        self.reason = reason or ("OK" if status_code < 400 else "Error")

    @property
    def ok(self):
        return self.status_code < 400

    @property
    def text(self):
        return self.content.decode("utf-8")

    def json(self):
        return json.loads(self.content)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} {self.reason}", response=self)


class FakeSession:
    """Stands in for requests.Session; responses are keyed by URL."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url))
        result = self.responses[url]
        if isinstance(result, Exception):
            raise result
        return result

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)


@pytest.fixture
def datasets():
    ne = DatasetDescriptor(
        key="NATURAL_EARTH",
        name="Natural Earth Boundaries",
        file_prefix="naturalearth_",
        downloads=(
            DownloadResource(url=COUNTRIES_URL, filename="countries.json", description="Countries"),
            DownloadResource(url=STATES_URL, filename="states.json", description="States"),
            DownloadResource(url=COUNTIES_URL, filename="counties.json", description="Counties"),
        ),
    )
    return {ne.key: ne}


@pytest.fixture
def config(tmp_path):
    return ServerConfig(data_dir=tmp_path / "data", lock_dir=tmp_path / "locks")


@pytest.fixture
def cache():
    return CacheService()


@pytest.fixture
def upstream():
    return FakeSession({
        COUNTRIES_URL: FakeResponse(200, COUNTRIES),
        STATES_URL: FakeResponse(200, STATES),
        COUNTIES_URL: FakeResponse(200, COUNTIES),
    })


@pytest.fixture
def write_level(config):
    """Write a collection straight into the data directory."""
    names = {0: "naturalearth_countries.json", 1: "naturalearth_states.json", 2: "naturalearth_counties.json"}

    def _write(level, data):
        config.data_dir.mkdir(parents=True, exist_ok=True)
        path = config.data_dir / names[level]
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def app(config, datasets, upstream):
    return create_app(config=config, datasets=datasets, session=upstream)


@pytest.fixture
def client(app):
    return app.test_client()
