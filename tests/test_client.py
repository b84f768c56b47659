"""Tests for the requests based API client."""

import json
from unittest.mock import Mock

import requests

from composition_client import CODE_ALPHABET, CompositionClient, generate_code


def _response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response.url = "http://test/api/v1/compositions/"
    response.encoding = "utf-8"
    response._content = body.encode("utf-8") if isinstance(body, str) else (
        json.dumps(body).encode("utf-8") if body is not None else b""
    )
    return response


def _client(*responses):
    session = Mock()
    session.request.side_effect = list(responses)
    return CompositionClient(base_url="http://test/", session=session), session


class TestGenerateCode:
    """Test code generation for the caller-chosen address scheme."""

    def test_default_length(self):
        code = generate_code()
        assert len(code) == 6
        assert all(ch in CODE_ALPHABET for ch in code)

    def test_custom_length(self):
        assert len(generate_code(10)) == 10


class TestCompositionClient:
    """Test the high level client methods."""

    def test_save_with_code(self):
        client, session = _client(_response(201, {"id": "ABC123"}))
        composition_id, error = client.save("Demo", "[]", composition_id="abc123")
        assert (composition_id, error) == ("ABC123", None)
        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == "http://test/api/v1/compositions/"
        assert kwargs["json"] == {"name": "Demo", "tracks": "[]", "id": "abc123"}

    def test_save_without_code(self):
        client, session = _client(_response(201, {"id": 1}))
        assert client.save("Demo", "[]") == (1, None)
        assert "id" not in session.request.call_args.kwargs["json"]

    def test_save_error(self):
        client, _ = _client(_response(400, {"detail": "Missing required fields: tracks"}))
        composition_id, error = client.save("Demo", "")
        assert composition_id is None
        assert error == {"status_code": 400, "message": "Missing required fields: tracks"}

    def test_get(self):
        body = {"id": 1, "name": "Demo", "tracks": "[]", "createdAt": "2024-01-01T00:00:00.000Z"}
        client, session = _client(_response(200, body))
        assert client.get(1) == (body, None)
        assert session.request.call_args.kwargs["url"] == "http://test/api/v1/compositions/1"

    def test_get_not_found(self):
        client, _ = _client(_response(404, {"detail": "Composition not found"}))
        assert client.get(99) == (None, None)

    def test_get_server_error(self):
        client, _ = _client(_response(503, {"detail": "Composition store unavailable"}))
        data, error = client.get(1)
        assert data is None
        assert error["status_code"] == 503

    def test_list(self):
        items = [{"id": 2, "name": "B", "createdAt": "t2"}, {"id": 1, "name": "A", "createdAt": "t1"}]
        client, _ = _client(_response(200, items))
        assert client.list() == (items, None)

    def test_delete(self):
        client, session = _client(_response(200, {"deleted": True}), _response(200, {"deleted": False}))
        assert client.delete(1) == (True, None)
        assert client.delete(1) == (False, None)
        assert session.request.call_args.kwargs["method"] == "DELETE"

    def test_connection_error(self):
        session = Mock()
        session.request.side_effect = requests.ConnectionError("connection refused")
        client = CompositionClient(base_url="http://test", session=session)
        items, error = client.list()
        assert items == []
        assert error == {"status_code": None, "message": "connection refused"}

    def test_code_is_quoted_in_url(self):
        client, session = _client(_response(200, {"deleted": True}))
        client.delete("AB/12 C")
        assert session.request.call_args.kwargs["url"] == "http://test/api/v1/compositions/AB%2F12%20C"

    def test_error_without_json_body(self):
        client, _ = _client(_response(502, "Bad Gateway from proxy"))
        composition_id, error = client.save("Demo", "[]")
        assert composition_id is None
        assert error == {"status_code": 502, "message": "Bad Gateway from proxy"}

    def test_custom_prefix(self):
        session = Mock()
        session.request.return_value = _response(200, [])
        client = CompositionClient(base_url="http://test", prefix="compositions/", session=session)
        assert client.list() == ([], None)
        assert session.request.call_args.kwargs["url"] == "http://test/compositions/"
