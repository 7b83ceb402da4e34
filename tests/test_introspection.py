"""Tests for introspection parsing and type unwrapping."""

from datetime import datetime, timezone

import pytest

from conftest import field, list_of, named, non_null, object_type
from optigraph.core.introspection import INTROSPECTION_QUERY, IntrospectionParser, is_content_type_name
from optigraph.core.ir import ListRef, NamedRef, NonNullRef, decode_type_ref, unwrap_type
from optigraph.core.scalars import ScalarRegistry


class TestTypeUnwrap:
    """Tests for decode_type_ref / unwrap_type."""

    def test_named(self):
        info = unwrap_type(decode_type_ref(named("String")))
        assert (info.type_name, info.underlying_type, info.is_nullable, info.is_list) == (
            "String", "String", True, False
        )

    def test_non_null(self):
        info = unwrap_type(decode_type_ref(non_null(named("Int"))))
        assert (info.type_name, info.underlying_type, info.is_nullable, info.is_list) == (
            "Int!", "Int", False, False
        )

    def test_list_of_non_null(self):
        info = unwrap_type(decode_type_ref(list_of(non_null(named("String")))))
        assert (info.type_name, info.underlying_type, info.is_nullable, info.is_list) == (
            "[String!]", "String", True, True
        )

    def test_non_null_list(self):
        info = unwrap_type(decode_type_ref(non_null(list_of(non_null(named("ID"))))))
        assert info.type_name == "[ID!]!"
        assert info.underlying_type == "ID"
        assert info.is_nullable is False
        assert info.is_list is True

    def test_missing_name_is_unknown(self):
        info = unwrap_type(decode_type_ref({"kind": "OBJECT", "name": None}))
        assert info.type_name == "Unknown"
        assert info.underlying_type == "Unknown"

    def test_truncated_wrapper_is_unknown(self):
        ref = decode_type_ref(non_null(None))
        assert ref == NonNullRef(NamedRef("Unknown"))
        assert unwrap_type(ref).type_name == "Unknown!"

    def test_decode_builds_tagged_union(self):
        ref = decode_type_ref(list_of(named("Date")))
        assert ref == ListRef(NamedRef("Date"))


class TestContentTypeNames:
    """Tests for the auxiliary-type exclusion rules."""

    @pytest.mark.parametrize("name", [
        "Query", "query", "Mutation", "Subscription", "__Type", "String", "TimeSpan",
        "QueryInfo", "MutationResult", "__Foo",
        "ArticlePageWhereInput", "ArticlePageOrderByInput", "ArticlePageOutput",
        "PageConnection", "PageEdge", "NameFacet", "NameAutocomplete", "SomeInput",
    ])
    def test_excluded(self, name):
        assert not is_content_type_name(name)

    @pytest.mark.parametrize("name", ["ArticlePage", "Person", "_Content", "Input2"])
    def test_kept(self, name):
        assert is_content_type_name(name)


class TestIntrospectionParser:
    """Tests for IntrospectionParser.parse."""

    def test_queryable_type_names(self, introspection_data):
        schema = IntrospectionParser().parse(introspection_data)
        assert schema.queryable_type_names == ["ArticlePage", "StandardPage", "_Content"]

    def test_content_types_and_order(self, introspection_data):
        schema = IntrospectionParser().parse(introspection_data)
        assert [t.name for t in schema.content_types] == ["ArticlePage", "StandardPage", "Person"]
        assert [t.is_queryable for t in schema.content_types] == [True, True, False]

    def test_auxiliary_types_dropped(self, introspection_data):
        names = {t.name for t in IntrospectionParser().parse(introspection_data).content_types}
        for excluded in ("Query", "ArticlePageWhereInput", "ArticlePageOutput", "ArticlePageFacet",
                         "QueryInfo", "__Type", "IContent", "EmptyBlock", "String"):
            assert excluded not in names

    def test_type_details(self, introspection_data):
        article = IntrospectionParser().parse(introspection_data).get_content_type("articlepage")
        assert article.description == "An article"
        assert article.interfaces == ["IContent", "IData"]
        assert [f.name for f in article.fields] == ["Name", "Published", "Tags", "Author"]

    def test_field_details(self, introspection_data):
        article = IntrospectionParser().parse(introspection_data).get_content_type("ArticlePage")

        name = article.get_field("Name")
        assert name.description == "Display name"
        assert name.type == "String"
        assert name.is_scalar and name.is_sortable and name.is_searchable and name.is_filterable
        assert name.available_operators == [
            "eq", "notEq", "like", "startsWith", "endsWith", "in", "notIn", "exist"
        ]

        published = article.get_field("Published")
        assert published.type == "DateTime!"
        assert published.is_nullable is False
        assert not published.is_searchable
        assert published.available_operators == ["eq", "notEq", "gt", "gte", "lt", "lte", "exist"]

        tags = article.get_field("Tags")
        assert tags.type == "[String!]"
        assert tags.is_list and tags.is_nullable and tags.is_searchable

        author = article.get_field("Author")
        assert author.underlying_type == "Person"
        assert not author.is_scalar and not author.is_sortable
        assert author.is_filterable
        assert author.available_operators == ["eq", "exist"]

    def test_reserved_root_field_does_not_make_type_queryable(self):
        data = {"__schema": {"queryType": {"name": "Query"}, "types": [
            object_type("Query", [field("_Content", named("_Content", "OBJECT"))]),
            object_type("_Content", [field("Name", named("String"))]),
        ]}}
        schema = IntrospectionParser().parse(data)
        assert schema.queryable_type_names == ["_Content"]
        assert schema.content_types[0].name == "_Content"
        assert schema.content_types[0].is_queryable is False

    def test_article_page_scenario(self):
        """Only the content type survives; the where-input and meta type do not."""
        data = {"__schema": {"queryType": {"name": "Query"}, "types": [
            object_type("Query", [field("ArticlePage", named("ArticlePageOutput", "OBJECT"))]),
            object_type("ArticlePage", [field("Name", named("String"))]),
            object_type("ArticlePageWhereInput", [field("Name", named("String"))]),
            object_type("__Type", [field("name", named("String"))]),
        ]}}
        schema = IntrospectionParser().parse(data)
        assert [(t.name, t.is_queryable) for t in schema.content_types] == [("ArticlePage", True)]

    def test_renamed_query_type(self):
        data = {"__schema": {"queryType": {"name": "Root"}, "types": [
            object_type("Root", [field("Page", named("Page", "OBJECT"))]),
            object_type("Page", [field("Title", named("String"))]),
        ]}}
        schema = IntrospectionParser().parse(data)
        assert [t.name for t in schema.content_types] == ["Page", "Root"]
        assert schema.content_types[0].is_queryable

    def test_missing_query_type_yields_empty_schema(self):
        data = {"__schema": {"queryType": {"name": "Query"}, "types": [
            object_type("Page", [field("Title", named("String"))]),
        ]}}
        schema = IntrospectionParser().parse(data)
        assert schema.content_types == []
        assert schema.queryable_type_names == []

    def test_none_data_yields_empty_schema(self):
        fetched_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        schema = IntrospectionParser().parse(None, fetched_at=fetched_at)
        assert schema.content_types == []
        assert schema.fetched_at == fetched_at

    def test_malformed_payload_raises(self):
        with pytest.raises(KeyError):
            IntrospectionParser().parse({"unexpected": True})

    def test_custom_scalar_registry(self, introspection_data):
        registry = ScalarRegistry()
        registry.register("Person", ["eq"])
        article = IntrospectionParser(registry).parse(introspection_data).get_content_type("ArticlePage")
        author = article.get_field("Author")
        assert author.is_scalar and author.is_sortable
        assert author.available_operators == ["eq"]


class TestIntrospectionQuery:
    """Tests for the fixed introspection query text."""

    def test_requests_required_shape(self):
        for fragment in ("queryType { name }", "fields(includeDeprecated: false)", "interfaces {", "ofType {"):
            assert fragment in INTROSPECTION_QUERY

    def test_unwraps_three_levels(self):
        assert INTROSPECTION_QUERY.count("ofType {") == 3
