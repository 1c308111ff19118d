"""Tests for request logging helpers."""

import pytest

from catalog.logging import clear_request_context, get_request_id, set_request_context
from catalog.middleware import graphql_operation_from_payload, sanitize_query_params


def test_sanitize_query_params():
    params = {"page": "2", "access_token": "abc", "Password": "hunter2", "name": "gold"}

    assert sanitize_query_params(params) == {
        "page": "2",
        "access_token": "[REDACTED]",
        "Password": "[REDACTED]",
        "name": "gold",
    }


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"operationName": "GetAll", "query": "query X { a }"}, "GetAll"),
        ({"query": "query GetAllPackages { getAllPackages { status } }"}, "GetAllPackages"),
        ({"query": "mutation Login($r: LoginInput!) { login(request: $r) { status } }"},
         "mutation:Login"),
        ({"query": "{ getSinglePackage(id: 1) { status } }"}, "getSinglePackage"),
        ({"query": "mutation { createPackage(request: {}) { status } }"},
         "mutation:createPackage"),
        ({"query": "{ __schema { types { name } } }"}, "__introspection"),
        ({"query": ""}, None),
        ({}, None),
    ],
)
def test_graphql_operation_from_payload(payload, expected):
    assert graphql_operation_from_payload(payload) == expected


def test_request_context_round_trip():
    set_request_context()
    request_id = get_request_id()
    assert request_id is not None
    assert len(request_id) == 14

    clear_request_context()
    assert get_request_id() is None
