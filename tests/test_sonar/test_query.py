"""Tests for sonarcli.sonar.query.

Covers:
- UrlTag parsing
- omitempty and zero values
- comma-joined and repeated list parameters
- inline sub-models
- map encoding
"""

from __future__ import annotations

from typing import Annotated, Optional

import pytest
from pydantic import BaseModel, Field, JsonValue

from sonarcli.sonar.common import PaginationArgs
from sonarcli.sonar.hotspots import HotspotsSearchOption
from sonarcli.sonar.query import UrlTag, encode_query, map_to_separated_string, url_tag_of


class EncodedOption(BaseModel):
    project: Annotated[str, UrlTag("project")] = ""
    branch: Annotated[str, UrlTag("branch,omitempty")] = ""
    count: Annotated[int, UrlTag("count,omitempty")] = 0
    flag: Annotated[bool, UrlTag("flag,omitempty")] = False
    always: Annotated[bool, UrlTag("always")] = False
    tri: Annotated[Optional[bool], UrlTag("tri,omitempty")] = None
    keys: Annotated[list[str], UrlTag("keys,omitempty,comma")] = Field(default_factory=list)
    values: Annotated[list[str], UrlTag("values,omitempty")] = Field(default_factory=list)
    params: Annotated[dict[str, str], UrlTag("params,omitempty")] = Field(default_factory=dict)
    extra: Annotated[dict[str, JsonValue], UrlTag("extra,omitempty")] = Field(default_factory=dict)
    untagged: str = "never sent"


class WithInline(BaseModel):
    query: Annotated[str, UrlTag("q,omitempty")] = ""
    pagination: Annotated[PaginationArgs, UrlTag(",inline")] = Field(default_factory=PaginationArgs)


class TestUrlTag:
    def test_name_and_options(self) -> None:
        tag = UrlTag("keys,omitempty,comma")
        assert tag.name == "keys"
        assert tag.omitempty and tag.comma
        assert not tag.inline

    def test_name_only(self) -> None:
        tag = UrlTag("project")
        assert tag.name == "project"
        assert tag.options == frozenset()

    def test_inline_without_name(self) -> None:
        tag = UrlTag(",inline")
        assert tag.name == ""
        assert tag.inline

    def test_lookup_on_model(self) -> None:
        assert url_tag_of(EncodedOption, "branch").name == "branch"
        assert url_tag_of(EncodedOption, "untagged") is None
        assert url_tag_of(EncodedOption, "nope") is None


class TestEncodeQuery:
    """Option models to ordered query pairs."""

    def test_defaults(self) -> None:
        assert encode_query(EncodedOption()) == [("project", ""), ("always", "false")]

    def test_none_option(self) -> None:
        assert encode_query(None) == []

    def test_scalars(self) -> None:
        opt = EncodedOption(project="p", branch="main", count=3, flag=True, always=True)
        assert encode_query(opt) == [
            ("project", "p"),
            ("branch", "main"),
            ("count", "3"),
            ("flag", "true"),
            ("always", "true"),
        ]

    @pytest.mark.parametrize(("tri", "expected"), [(None, []), (False, []), (True, [("tri", "true")])])
    def test_tri_state(self, tri: Optional[bool], expected: list[tuple[str, str]]) -> None:
        pairs = [pair for pair in encode_query(EncodedOption(tri=tri)) if pair[0] == "tri"]
        assert pairs == expected

    def test_comma_list(self) -> None:
        pairs = encode_query(EncodedOption(keys=["a", "b", "c"]))
        assert ("keys", "a,b,c") in pairs

    def test_repeated_list(self) -> None:
        pairs = encode_query(EncodedOption(values=["x", "y"]))
        assert [pair for pair in pairs if pair[0] == "values"] == [("values", "x"), ("values", "y")]

    def test_string_map(self) -> None:
        pairs = encode_query(EncodedOption(params={"max": "200", "min": "10"}))
        assert ("params", "max=200;min=10") in pairs

    def test_json_map(self) -> None:
        pairs = encode_query(EncodedOption(extra={"a": 1, "b": [True]}))
        assert ("extra", '{"a":1,"b":[true]}') in pairs

    def test_untagged_field_not_sent(self) -> None:
        assert all(name != "untagged" for name, _ in encode_query(EncodedOption()))

    def test_inline_fields_flattened(self) -> None:
        opt = WithInline(query="x", pagination=PaginationArgs(page=2, page_size=50))
        assert encode_query(opt) == [("q", "x"), ("p", "2"), ("ps", "50")]

    def test_inline_zero_values_omitted(self) -> None:
        assert encode_query(WithInline()) == []

    def test_sdk_option(self) -> None:
        opt = HotspotsSearchOption(project="core", pagination=PaginationArgs(page=1))
        pairs = dict(encode_query(opt))
        assert pairs["project"] == "core"
        assert pairs["p"] == "1"
        assert "ps" not in pairs


class TestMapToSeparatedString:
    def test_default_separators(self) -> None:
        assert map_to_separated_string({"a": "1", "b": "2"}) == "a=1;b=2"

    def test_custom_separators(self) -> None:
        assert map_to_separated_string({"a": "1", "b": "2"}, ",", ":") == "a:1,b:2"

    def test_empty(self) -> None:
        assert map_to_separated_string({}) == ""
