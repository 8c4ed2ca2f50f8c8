from fastapi.testclient import TestClient

from echoserver.config import ServerConfig
from echoserver.main import create_app


def make_client(*paths, route="/swagger.json"):
    config = ServerConfig(document_route=route, document_paths=tuple(str(p) for p in paths))
    return TestClient(create_app(config))


def test_serves_document_bytes(tmp_path):
    doc = tmp_path / "swagger.json"
    doc.write_bytes(b'{"swagger": "2.0"}')
    resp = make_client(doc).get("/swagger.json")
    assert resp.status_code == 200
    assert resp.content == b'{"swagger": "2.0"}'
    assert resp.headers["content-type"] == "application/json"
    assert resp.headers["x-server"] == "http-swagger-server"


def test_content_is_not_validated(tmp_path):
    doc = tmp_path / "swagger.json"
    doc.write_bytes(b"not json at all")
    assert make_client(doc).get("/swagger.json").content == b"not json at all"


def test_falls_back_to_second_path(tmp_path):
    fallback = tmp_path / "fallback.json"
    fallback.write_bytes(b"{}")
    resp = make_client(tmp_path / "missing.json", fallback).get("/swagger.json")
    assert resp.status_code == 200
    assert resp.content == b"{}"


def test_rereads_on_every_request(tmp_path):
    doc = tmp_path / "swagger.json"
    doc.write_bytes(b'{"v": 1}')
    client = make_client(doc)
    assert client.get("/swagger.json").content == b'{"v": 1}'
    doc.write_bytes(b'{"v": 2}')
    assert client.get("/swagger.json").content == b'{"v": 2}'


def test_custom_route_uses_fixed_paths(tmp_path):
    doc = tmp_path / "swagger.json"
    doc.write_bytes(b"{}")
    client = make_client(doc, route="/api/docs.json")
    assert client.get("/api/docs.json").content == b"{}"
    # the default route is no longer special and falls through to the echo handler
    assert client.get("/swagger.json").json()["path"] == "/swagger.json"


def test_missing_document_fails_without_affecting_other_routes(tmp_path):
    client = make_client(tmp_path / "a.json", tmp_path / "b.json")
    resp = client.get("/swagger.json")
    assert resp.status_code == 500
    assert resp.content == b""
    assert client.get("/status").status_code == 200
    assert client.get("/").status_code == 200
