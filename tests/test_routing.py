"""Tests for routing, error rendering and request logging."""

import logging

import pytest

from stubapi.app import route_table


def test_unknown_path_is_json_404(client):
    response = client.get("/nonexistent")

    assert response.status_code == 404
    assert response.content_type == "application/json"
    assert response.get_json() == {"error": "not found"}


def test_wrong_method_is_json_405_with_allow_header(client):
    response = client.patch("/users")

    assert response.status_code == 405
    assert response.get_json() == {"error": "method not allowed"}
    allowed = {m.strip() for m in response.headers["Allow"].split(",")}
    assert {"GET", "POST"} <= allowed


@pytest.mark.parametrize(
    "method,path",
    [("POST", "/health"), ("DELETE", "/posts/1"), ("PUT", "/posts"), ("POST", "/users/1")],
)
def test_known_paths_reject_unsupported_methods(client, method, path):
    assert client.open(path, method=method).status_code == 405


@pytest.mark.parametrize(
    "method,path,body,expected",
    [
        ("GET", "/health", None, 200),
        ("GET", "/health/ready", None, 200),
        ("GET", "/users", None, 200),
        ("POST", "/users", {"name": "Test", "email": "test@example.com"}, 201),
        ("GET", "/users/1", None, 200),
        ("PUT", "/users/1", {"name": "Updated"}, 200),
        ("DELETE", "/users/1", None, 204),
        ("GET", "/users/1/posts", None, 200),
        ("GET", "/posts", None, 200),
        ("POST", "/posts", {"userId": 1, "title": "Test", "body": "Content"}, 201),
        ("GET", "/posts/1", None, 200),
    ],
)
def test_endpoint_status_codes(client, method, path, body, expected):
    response = client.open(path, method=method, json=body)

    assert response.status_code == expected


def test_route_table_lists_declared_routes(app):
    rows = {(row["method"], row["path"]) for row in route_table(app)}

    assert rows == {
        ("GET", "/health"),
        ("GET", "/health/ready"),
        ("GET", "/users"),
        ("POST", "/users"),
        ("GET", "/users/<user_id>"),
        ("PUT", "/users/<user_id>"),
        ("DELETE", "/users/<user_id>"),
        ("GET", "/users/<user_id>/posts"),
        ("GET", "/posts"),
        ("POST", "/posts"),
        ("GET", "/posts/<post_id>"),
    }


def test_route_table_cli_prints_json_lines(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["route-table"])

    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert len(lines) == 11
    assert '"path": "/health"' in lines[0]


def test_each_request_is_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="stubapi.app"):
        client.get("/users/7")

    messages = [r.getMessage() for r in caplog.records if r.name == "stubapi.app"]
    assert len(messages) == 1
    assert '"GET /users/7 HTTP/1.1"' in messages[0]
    assert " - 200 " in messages[0]


def test_failed_requests_are_logged_with_status(client, caplog):
    with caplog.at_level(logging.INFO, logger="stubapi.app"):
        client.get("/posts/abc")

    messages = [r.getMessage() for r in caplog.records if r.name == "stubapi.app"]
    assert any(" - 400 " in message for message in messages)


def test_unexpected_errors_become_json_500(app):
    @app.route("/boom")
    def boom():
        raise RuntimeError("boom")

    response = app.test_client().get("/boom")

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal server error"}


@pytest.mark.parametrize("method", ["HEAD", "OPTIONS"])
@pytest.mark.parametrize(
    "path,allow",
    [
        ("/health", "GET"),
        ("/users", "GET, POST"),
        ("/users/1", "DELETE, GET, PUT"),
        ("/users/1/posts", "GET"),
        ("/posts/1", "GET"),
    ],
)
def test_undeclared_methods_on_known_paths_are_405(client, method, path, allow):
    response = client.open(path, method=method)

    assert response.status_code == 405
    assert response.content_type == "application/json"
    assert response.headers["Allow"] == allow


def test_options_on_unknown_path_is_404(client):
    assert client.options("/nonexistent").status_code == 404


def test_routing_error_body_matches_other_errors(client):
    not_found = client.get("/nonexistent").get_data(as_text=True)
    not_allowed = client.patch("/users").get_data(as_text=True)

    assert not_found == '{"error":"not found"}\n'
    assert not_allowed == '{"error":"method not allowed"}\n'


def test_405_allow_header_lists_only_declared_methods(client):
    response = client.patch("/users")

    assert response.headers["Allow"] == "GET, POST"


@pytest.mark.parametrize("path", ["/users/", "/posts/", "/users/1/"])
def test_trailing_slash_paths_are_not_routes(client, path):
    assert client.get(path).status_code == 404
