"""Shared fixtures."""

import json

import httpx
import pytest

from optigraph.core.settings import AuthenticationMode, GraphSettings
from optigraph.core.transport import GraphQLTransport

ENDPOINT = "https://cg.example.com/content/v2?cache=false"


def named(name, kind="SCALAR"):
    return {"kind": kind, "name": name, "ofType": None}


def non_null(inner):
    return {"kind": "NON_NULL", "name": None, "ofType": inner}


def list_of(inner):
    return {"kind": "LIST", "name": None, "ofType": inner}


def field(name, type_ref, description=None):
    return {"name": name, "description": description, "type": type_ref}


def object_type(name, fields, interfaces=(), description=None, kind="OBJECT"):
    return {
        "kind": kind,
        "name": name,
        "description": description,
        "fields": fields,
        "interfaces": [{"name": i} for i in interfaces],
    }


@pytest.fixture
def introspection_data():
    """A small content graph schema as returned by introspection."""
    return {
        "__schema": {
            "queryType": {"name": "Query"},
            "types": [
                object_type("Query", [
                    field("ArticlePage", named("ArticlePageOutput", "OBJECT")),
                    field("StandardPage", named("StandardPageOutput", "OBJECT")),
                    field("_Content", named("_ContentOutput", "OBJECT")),
                    field("__typename", non_null(named("String"))),
                ]),
                object_type(
                    "ArticlePage",
                    [
                        field("Name", named("String"), "Display name"),
                        field("Published", non_null(named("DateTime"))),
                        field("Tags", list_of(non_null(named("String")))),
                        field("Author", named("Person", "OBJECT")),
                        field("__typename", non_null(named("String"))),
                    ],
                    interfaces=["IContent", "IData"],
                    description="An article",
                ),
                object_type("StandardPage", [field("Views", named("Int"))]),
                object_type("Person", [field("Age", named("Int"))]),
                object_type("EmptyBlock", []),
                object_type("ArticlePageWhereInput", [field("Name", named("String"))]),
                object_type("ArticlePageOutput", [field("total", named("Int"))]),
                object_type("ArticlePageFacet", [field("Name", named("String"))]),
                object_type("QueryInfo", [field("Id", named("ID"))]),
                object_type("__Type", [field("name", named("String"))]),
                object_type("IContent", [field("Name", named("String"))], kind="INTERFACE"),
                {"kind": "SCALAR", "name": "String", "description": None, "fields": None, "interfaces": None},
            ],
        }
    }


@pytest.fixture
def settings():
    return GraphSettings(
        endpoint=ENDPOINT,
        auth_mode=AuthenticationMode.SINGLE_KEY,
        single_key="single-123",
    )


def make_transport(settings, handler, **kwargs):
    """Build a GraphQLTransport whose HTTP traffic goes to `handler`."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GraphQLTransport(settings, client=client, **kwargs)


def json_handler(payload, status_code=200, calls=None):
    """Return an httpx handler answering every request with `payload`."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, content=json.dumps(payload).encode())

    return handler
