"""
Tests for the Flask preview server.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from flask.testing import FlaskClient

from app import CONFIG_ENV, create_app
from topic_mapper.config import MapperConfig
from topic_mapper.exceptions import MappingConfigError
from topic_mapper.mapper import Mapper

MAPPINGS = [
    {
        "topic": "grid/power",
        "type": "float",
        "json_key": "power",
        "measurement_positive": "grid",
        "field_positive": "import",
        "measurement_negative": "grid",
        "field_negative": "export",
    },
    {
        "topic": "pv/power",
        "type": "integer",
        "measurement": "pv",
        "field": "power",
    },
]


@pytest.fixture
def client() -> FlaskClient:
    mapper = Mapper.from_dicts(
        MAPPINGS, config=MapperConfig(log_level=logging.WARNING)
    )
    app = create_app(mapper)
    app.config["TESTING"] = True
    return app.test_client()


class TestIntrospection:
    def test_health(self, client: FlaskClient) -> None:
        body = client.get("/api/health").get_json()
        assert body["status"] == "online"
        assert body["definitions"] == 2
        assert body["topics"] == 2

    def test_topics(self, client: FlaskClient) -> None:
        body = client.get("/api/topics").get_json()
        assert body["topics"] == [
            {
                "topic": "grid/power",
                "mappings": "grid:import (+) grid:export (-) (float)",
            },
            {"topic": "pv/power", "mappings": "pv:power (integer)"},
        ]


class TestResolve:
    def test_records(self, client: FlaskClient) -> None:
        response = client.post(
            "/api/resolve",
            json={"topic": "grid/power", "message": '{"power": -42.5}'},
        )
        assert response.status_code == 200
        assert response.get_json()["records"] == [
            {"measurement": "grid", "field": "export", "value": 42.5},
            {"measurement": "grid", "field": "import", "value": 0.0},
        ]

    def test_malformed_payload_yields_no_records(self, client: FlaskClient) -> None:
        response = client.post(
            "/api/resolve", json={"topic": "grid/power", "message": "{oops"}
        )
        assert response.status_code == 200
        assert response.get_json()["records"] == []

    def test_unknown_topic(self, client: FlaskClient) -> None:
        response = client.post(
            "/api/resolve", json={"topic": "pv/powr", "message": "1"}
        )
        assert response.status_code == 404
        assert response.get_json()["suggestions"] == ["pv/power"]

    def test_non_text_message(self, client: FlaskClient) -> None:
        response = client.post(
            "/api/resolve", json={"topic": "grid/power", "message": {"power": 1}}
        )
        assert response.status_code == 400

    def test_missing_topic(self, client: FlaskClient) -> None:
        response = client.post("/api/resolve", json={"message": "1"})
        assert response.status_code == 400


class TestFactory:
    def test_loads_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "mappings.json"
        path.write_text(json.dumps(MAPPINGS), encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV, str(path))
        app = create_app()
        assert app.config["MAPPER"].topics() == ("grid/power", "pv/power")

    def test_requires_configuration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV, raising=False)
        with pytest.raises(MappingConfigError):
            create_app()
