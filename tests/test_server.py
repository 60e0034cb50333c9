import json

import pytest
from fastapi.testclient import TestClient

from server import app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("WAFMATCH_RULES_PATH", raising=False)
    with TestClient(app) as c:
        yield c


def test_match_endpoint(client):
    r = client.post(
        "/match",
        json={
            "status_code": 400,
            "headers": {"server": "AkamaiGHost"},
            "body": '<html><title>Invalid URL</title>The requested URL "[no URL]", is invalid.</html>',
        },
    )
    assert r.status_code == 200
    # titleは本文から抽出される
    assert r.json() == {"providers": ["akamai"]}


def test_add_rules_endpoint(client):
    doc = {"services": {"custom": {"http_title": "Blocked by custom WAF"}}}
    r = client.post("/rules", content=json.dumps(doc))
    assert r.status_code == 200
    assert r.json()["loaded"] == ["custom"]
    assert "custom" in client.get("/providers").json()

    r = client.post("/match", json={"status_code": 403, "title": "Blocked by custom WAF"})
    assert "custom" in r.json()["providers"]


def test_add_rules_rejects_bad_document(client):
    r = client.post("/rules", content="{not json")
    assert r.status_code == 400
    r = client.post("/rules", content=json.dumps({"services": {"x": {"http_body_regex": ["("]}}}))
    assert r.status_code == 400
    assert "x" in r.json()["detail"]


def test_rules_path_from_env(tmp_path, monkeypatch):
    p = tmp_path / "rules.json"
    p.write_text(json.dumps({"services": {"only": {"http_status_code": "418"}}}), encoding="utf-8")
    monkeypatch.setenv("WAFMATCH_RULES_PATH", str(p))
    with TestClient(app) as c:
        assert c.get("/providers").json() == ["only"]
        assert c.post("/match", json={"status_code": 418}).json() == {"providers": ["only"]}
