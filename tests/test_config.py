from __future__ import annotations

from graphql_http_link.config import (
    FALLBACK_HTTP_CONFIG,
    HttpConfig,
    HttpQueryOptions,
    merge_headers,
    select_http_options_and_body,
)
from graphql_http_link.operation import create_operation

HERO_QUERY = "query HeroName($episode: Episode) { hero(episode: $episode) { name } }"


def _operation(**context: object):
    return create_operation(
        {
            "query": HERO_QUERY,
            "variables": {"episode": "JEDI"},
            "operation_name": "HeroName",
            "extensions": {"persistedQuery": {"version": 1}},
        },
        context=context,
    )


def test_per_call_headers_override_field_by_field() -> None:
    options, _ = select_http_options_and_body(
        _operation(),
        HttpConfig(headers={"A": 1}),
        HttpConfig(headers={"B": 2}),
        HttpConfig(headers={"A": 3}),
    )
    assert options["headers"] == {"A": 3, "B": 2}


def test_baseline_value_survives_when_higher_layers_are_silent() -> None:
    options, _ = select_http_options_and_body(
        _operation(),
        HttpConfig(options={"method": "POST", "timeout": 5}, credentials="same-origin"),
        HttpConfig(options={"method": None}, credentials=None),
        HttpConfig(),
    )
    assert options["method"] == "POST"
    assert options["timeout"] == 5
    assert options["credentials"] == "same-origin"


def test_per_call_layer_wins_over_construction_and_baseline() -> None:
    options, _ = select_http_options_and_body(
        _operation(),
        FALLBACK_HTTP_CONFIG,
        HttpConfig(options={"method": "PUT"}, credentials="omit"),
        HttpConfig(options={"method": "PATCH"}, credentials="include"),
    )
    assert options["method"] == "PATCH"
    assert options["credentials"] == "include"


def test_fallback_config_defaults() -> None:
    options, body = select_http_options_and_body(_operation(), FALLBACK_HTTP_CONFIG)
    assert options == {
        "method": "POST",
        "headers": {"accept": "*/*", "content-type": "application/json"},
    }
    assert body == {
        "operationName": "HeroName",
        "variables": {"episode": "JEDI"},
        "query": HERO_QUERY,
    }


def test_include_extensions_and_skip_query() -> None:
    _, body = select_http_options_and_body(
        _operation(),
        FALLBACK_HTTP_CONFIG,
        HttpConfig(http=HttpQueryOptions(include_extensions=True)),
        HttpConfig(http=HttpQueryOptions(include_query=False)),
    )
    assert body["extensions"] == {"persistedQuery": {"version": 1}}
    assert "query" not in body


def test_unset_http_flag_keeps_lower_layer() -> None:
    _, body = select_http_options_and_body(
        _operation(),
        FALLBACK_HTTP_CONFIG,
        HttpConfig(http=HttpQueryOptions(include_extensions=True)),
        HttpConfig(http=HttpQueryOptions(include_extensions=None)),
    )
    assert "extensions" in body


def test_from_context_reads_per_call_layer() -> None:
    config = HttpConfig.from_context(
        {
            "http": {"includeExtensions": True},
            "fetch_options": {"timeout": 2},
            "credentials": "include",
            "headers": {"x-trace": "abc"},
            "response": object(),
        }
    )
    assert config.http == HttpQueryOptions(include_extensions=True)
    assert config.options == {"timeout": 2}
    assert config.credentials == "include"
    assert config.headers == {"x-trace": "abc"}


def test_merge_headers_ignores_case_and_keeps_override_spelling() -> None:
    merged = merge_headers({"content-type": "application/json", "accept": "*/*"}, {"Content-Type": "application/graphql"})
    assert merged == {"accept": "*/*", "Content-Type": "application/graphql"}


def test_select_does_not_mutate_layers() -> None:
    link_headers = {"x-link": "1"}
    select_http_options_and_body(_operation(), FALLBACK_HTTP_CONFIG, HttpConfig(headers=link_headers), HttpConfig(headers={"x-call": "2"}))
    assert link_headers == {"x-link": "1"}
    assert FALLBACK_HTTP_CONFIG.headers == {"accept": "*/*", "content-type": "application/json"}
