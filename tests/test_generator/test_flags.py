"""Tests for sonarcli.generator.flags.

Covers:
- PascalCase / snake_case to kebab-case names
- Each slot's parsing rules
- Binding option models: inline flattening, untagged fields, required flags
- FlagSet.apply errors and repeated values
- Typer parameter declarations
"""

from __future__ import annotations

from typing import Annotated, Optional

import pytest
from pydantic import BaseModel, Field, JsonValue

from sonarcli.exceptions import FlagValueError, MissingFlagError
from sonarcli.generator.flags import (
    BoolValue,
    FlagBinding,
    FlagSet,
    IntValue,
    JSONMapValue,
    StringMapValue,
    StringSliceValue,
    StringValue,
    TriStateBool,
    bind_flags,
    flag_kind_of,
    kebab_case,
    parse_bool,
    pascal_to_kebab,
    typer_option_for,
)
from sonarcli.models import FlagKind
from sonarcli.sonar.common import PaginationArgs
from sonarcli.sonar.hotspots import HotspotsSearchOption
from sonarcli.sonar.query import UrlTag


class SampleOption(BaseModel):
    project: Annotated[str, UrlTag("project")] = Field(default="", description="Project key.")
    branch: Annotated[str, UrlTag("branch,omitempty")] = ""
    verbose: Annotated[bool, UrlTag("verbose,omitempty")] = False
    limit: Annotated[int, UrlTag("limit,omitempty")] = 0
    tags: Annotated[list[str], UrlTag("tags,omitempty,comma")] = Field(default_factory=list)
    resolved: Annotated[Optional[bool], UrlTag("resolved,omitempty")] = None
    params: Annotated[dict[str, str], UrlTag("params,omitempty")] = Field(default_factory=dict)
    extra: Annotated[dict[str, JsonValue], UrlTag("extra,omitempty")] = Field(default_factory=dict)
    from_: Annotated[str, UrlTag("from,omitempty")] = ""
    internal: str = ""
    ratio: Annotated[float, UrlTag("ratio,omitempty")] = 0.0


class PagedOption(BaseModel):
    query: Annotated[str, UrlTag("q,omitempty")] = ""
    pagination: Annotated[PaginationArgs, UrlTag("pagination,inline")] = Field(default_factory=PaginationArgs)


def _bound(opt: BaseModel) -> FlagSet:
    flag_set = FlagSet()
    bind_flags(flag_set, opt)
    return flag_set


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


class TestPascalToKebab:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Project", "project"),
            ("ImpactSeverities", "impact-severities"),
            ("HTMLParser", "html-parser"),
            ("PciDss32", "pci-dss32"),
            ("OwaspAsvs40", "owasp-asvs40"),
            ("ID", "id"),
            ("", ""),
        ],
    )
    def test_conversion(self, name: str, expected: str) -> None:
        assert pascal_to_kebab(name) == expected


class TestKebabCase:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("project_keys", "project-keys"),
            ("from_", "from"),
            ("in_new_code_period", "in-new-code-period"),
            ("q", "q"),
        ],
    )
    def test_conversion(self, name: str, expected: str) -> None:
        assert kebab_case(name) == expected


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


class TestParseBool:
    @pytest.mark.parametrize("raw", ["1", "t", "T", "TRUE", "true", "True"])
    def test_true(self, raw: str) -> None:
        assert parse_bool(raw) is True

    @pytest.mark.parametrize("raw", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false(self, raw: str) -> None:
        assert parse_bool(raw) is False

    @pytest.mark.parametrize("raw", ["yes", "tRuE", ""])
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(FlagValueError):
            parse_bool(raw)


class TestScalarSlots:
    def test_string(self) -> None:
        opt = SampleOption()
        StringValue(opt, "project").set("my-proj")
        assert opt.project == "my-proj"

    def test_bool_accepts_native_and_text(self) -> None:
        opt = SampleOption()
        slot = BoolValue(opt, "verbose")
        slot.set(True)
        assert opt.verbose is True
        slot.set("0")
        assert opt.verbose is False

    def test_int_bases(self) -> None:
        opt = SampleOption()
        slot = IntValue(opt, "limit")
        slot.set("0x10")
        assert opt.limit == 16
        slot.set(7)
        assert opt.limit == 7

    def test_int_rejects_text(self) -> None:
        with pytest.raises(FlagValueError, match="invalid integer"):
            IntValue(SampleOption(), "limit").set("ten")


class TestStringSliceValue:
    """The first value replaces the default, later values append."""

    def test_first_set_replaces_default(self) -> None:
        opt = SampleOption(tags=["default"])
        StringSliceValue(opt, "tags").set("a,b")
        assert opt.tags == ["a", "b"]

    def test_later_sets_append(self) -> None:
        opt = SampleOption()
        slot = StringSliceValue(opt, "tags")
        slot.set("a,b")
        slot.set("c")
        assert opt.tags == ["a", "b", "c"]

    def test_empty_string_clears(self) -> None:
        opt = SampleOption(tags=["x"])
        StringSliceValue(opt, "tags").set("")
        assert opt.tags == []


class TestTriStateBool:
    """true, false, or unset."""

    @pytest.mark.parametrize(("raw", "expected"), [("true", True), ("false", False)])
    def test_values(self, raw: str, expected: bool) -> None:
        opt = SampleOption()
        slot = TriStateBool(opt, "resolved")
        slot.set(raw)
        assert opt.resolved is expected
        assert slot.touched is True

    def test_empty_resets_to_none(self) -> None:
        opt = SampleOption(resolved=True)
        slot = TriStateBool(opt, "resolved")
        slot.set("")
        assert opt.resolved is None
        assert slot.touched is True

    def test_untouched_by_default(self) -> None:
        slot = TriStateBool(SampleOption(), "resolved")
        assert slot.touched is False
        assert slot.get() is None

    def test_invalid(self) -> None:
        with pytest.raises(FlagValueError, match="must be true, false, or empty"):
            TriStateBool(SampleOption(), "resolved").set("1")

    @pytest.mark.parametrize("raw", ["TRUE", "False", "tRuE", " true"])
    def test_spelling_is_exact(self, raw: str) -> None:
        opt = SampleOption()
        with pytest.raises(FlagValueError, match=f'invalid boolean value: "{raw}"'):
            TriStateBool(opt, "resolved").set(raw)
        assert opt.resolved is None


class TestStringMapValue:
    def test_pairs(self) -> None:
        opt = SampleOption()
        StringMapValue(opt, "params").set("max= 200 , min=10")
        assert opt.params == {"max": "200", "min": "10"}

    def test_value_may_contain_equals(self) -> None:
        opt = SampleOption()
        StringMapValue(opt, "params").set("expr=a=b")
        assert opt.params == {"expr": "a=b"}

    def test_empty_is_no_op(self) -> None:
        opt = SampleOption(params={"keep": "me"})
        StringMapValue(opt, "params").set("")
        assert opt.params == {"keep": "me"}

    def test_missing_separator(self) -> None:
        with pytest.raises(FlagValueError, match='invalid key=value pair: "novalue"'):
            StringMapValue(SampleOption(), "params").set("a=1,novalue")

    def test_empty_key(self) -> None:
        with pytest.raises(FlagValueError, match="empty key"):
            StringMapValue(SampleOption(), "params").set(" =1")


class TestJSONMapValue:
    def test_object(self) -> None:
        opt = SampleOption()
        JSONMapValue(opt, "extra").set('{"a": 1, "b": [true, null]}')
        assert opt.extra == {"a": 1, "b": [True, None]}

    def test_empty_is_no_op(self) -> None:
        opt = SampleOption()
        JSONMapValue(opt, "extra").set("")
        assert opt.extra == {}

    def test_malformed(self) -> None:
        with pytest.raises(FlagValueError, match="invalid JSON"):
            JSONMapValue(SampleOption(), "extra").set("{not json")

    def test_non_object(self) -> None:
        with pytest.raises(FlagValueError, match="expected an object"):
            JSONMapValue(SampleOption(), "extra").set("[1, 2]")


class TestFlagKindOf:
    def test_supported(self) -> None:
        assert flag_kind_of(str) is FlagKind.STRING
        assert flag_kind_of(bool) is FlagKind.BOOL
        assert flag_kind_of(int) is FlagKind.INT
        assert flag_kind_of(list[str]) is FlagKind.STRING_LIST
        assert flag_kind_of(Optional[bool]) is FlagKind.TRI_STATE_BOOL
        assert flag_kind_of(dict[str, str]) is FlagKind.STRING_MAP
        assert flag_kind_of(dict[str, JsonValue]) is FlagKind.JSON_MAP

    def test_unsupported(self) -> None:
        assert flag_kind_of(float) is None
        assert flag_kind_of(list[int]) is None
        assert flag_kind_of(Optional[str]) is None


# ---------------------------------------------------------------------------
# Binding
# ---------------------------------------------------------------------------


class TestBindFlags:
    """Tagged fields become flags in declaration order."""

    def test_names_and_order(self) -> None:
        names = [binding.name for binding in _bound(SampleOption())]
        assert names == ["project", "branch", "verbose", "limit", "tags", "resolved", "params", "extra", "from"]

    def test_untagged_and_unsupported_fields_skipped(self) -> None:
        flag_set = _bound(SampleOption())
        assert "internal" not in flag_set
        assert "ratio" not in flag_set

    def test_required_without_omitempty(self) -> None:
        flag_set = _bound(SampleOption())
        assert flag_set.lookup("project").required is True
        assert flag_set.is_required("project")
        assert not flag_set.is_required("branch")

    def test_kinds(self) -> None:
        flag_set = _bound(SampleOption())
        assert flag_set.lookup("tags").kind is FlagKind.STRING_LIST
        assert flag_set.lookup("resolved").kind is FlagKind.TRI_STATE_BOOL
        assert flag_set.lookup("extra").kind is FlagKind.JSON_MAP

    def test_help_includes_api_parameter(self) -> None:
        flag_set = _bound(SampleOption())
        assert flag_set.lookup("project").help == "Project key. API parameter: project"
        assert flag_set.lookup("branch").help == "API parameter: branch"

    def test_inline_model_flattened_without_prefix(self) -> None:
        flag_set = _bound(PagedOption())
        assert [b.name for b in flag_set] == ["query", "page", "page-size"]
        assert flag_set.lookup("page").field_path == "pagination.page"
        assert flag_set.lookup("page-size").required is False

    def test_inline_slots_write_into_sub_model(self) -> None:
        opt = PagedOption()
        flag_set = _bound(opt)
        flag_set.apply({"page": 3, "page-size": "50"})
        assert opt.pagination.page == 3
        assert opt.pagination.page_size == 50

    def test_prefix(self) -> None:
        flag_set = FlagSet()
        bind_flags(flag_set, PagedOption(), prefix="search")
        assert [b.name for b in flag_set] == ["search-query", "search-page", "search-page-size"]

    def test_sdk_option_with_inline_pagination(self) -> None:
        names = {binding.name for binding in _bound(HotspotsSearchOption())}
        assert {"page", "page-size"} <= names

    def test_duplicate_name_rejected(self) -> None:
        opt = SampleOption()
        flag_set = FlagSet()
        binding = FlagBinding("project", False, "project", FlagKind.STRING, StringValue(opt, "project"))
        flag_set.add(binding)
        with pytest.raises(ValueError, match="flag redefined: project"):
            flag_set.add(binding)


class TestFlagSetApply:
    def test_values_reach_the_model(self) -> None:
        opt = SampleOption()
        flag_set = _bound(opt)
        flag_set.apply(
            {
                "project": "core",
                "verbose": True,
                "limit": 5,
                "tags": ["a,b", "c"],
                "resolved": "false",
                "params": "k=v",
                "extra": '{"n": 1}',
                "from": "2024-01-01",
            }
        )
        assert opt.project == "core"
        assert opt.verbose is True
        assert opt.limit == 5
        assert opt.tags == ["a", "b", "c"]
        assert opt.resolved is False
        assert opt.params == {"k": "v"}
        assert opt.extra == {"n": 1}
        assert opt.from_ == "2024-01-01"

    def test_missing_values_leave_defaults(self) -> None:
        opt = SampleOption()
        _bound(opt).apply({"project": "core", "tags": [], "branch": None})
        assert opt.tags == []
        assert opt.branch == ""

    def test_missing_required_flag(self) -> None:
        with pytest.raises(MissingFlagError, match='required flag "--project" not set'):
            _bound(SampleOption()).apply({"branch": "main"})

    def test_invalid_value_names_the_flag(self) -> None:
        with pytest.raises(FlagValueError) as exc_info:
            _bound(SampleOption()).apply({"project": "p", "resolved": "maybe"})
        assert str(exc_info.value).startswith('invalid argument "maybe" for "--resolved" flag: ')


# ---------------------------------------------------------------------------
# Typer parameters
# ---------------------------------------------------------------------------


class TestTyperOptionFor:
    def _option(self, name: str):
        return typer_option_for(_bound(SampleOption()).lookup(name))

    def test_required_string(self) -> None:
        annotation, option = self._option("project")
        assert annotation == Optional[str]
        assert option.default is ...
        assert option.param_decls == ("--project",)

    def test_bool_defaults_false(self) -> None:
        annotation, option = self._option("verbose")
        assert annotation is bool
        assert option.default is False

    def test_int(self) -> None:
        annotation, option = self._option("limit")
        assert annotation == Optional[int]
        assert option.default is None

    def test_list(self) -> None:
        annotation, _ = self._option("tags")
        assert annotation == Optional[list[str]]

    def test_metavars(self) -> None:
        assert self._option("resolved")[1].metavar == "true|false"
        assert self._option("params")[1].metavar == "KEY=VAL,..."
        assert self._option("extra")[1].metavar == "JSON"
        assert self._option("branch")[1].metavar is None
