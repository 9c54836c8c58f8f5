"""Tests for sonarcli.generator.shapes.

Covers:
- Classification of every return annotation pattern
- Optional unwrapping of the value element
- Missing and unresolvable annotations
- response_type_of / option_type_of helpers
- Classification of the real SDK methods
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import httpx
from pydantic import BaseModel

from sonarcli.generator.shapes import classify_method, option_type_of, response_type_of, unwrap_optional
from sonarcli.models import ReturnShape
from sonarcli.sonar.batch import BatchService
from sonarcli.sonar.hotspots import HotspotsService
from sonarcli.sonar.project_analyses import ProjectAnalysesService, ProjectAnalysis
from sonarcli.sonar.projects import ProjectsSearch, ProjectsSearchOption, ProjectsService
from sonarcli.sonar.push import PushService
from sonarcli.sonar.system import SystemService


class Item(BaseModel):
    key: str = ""


class ItemOption(BaseModel):
    query: str = ""


class FakeService:
    def no_body(self, opt: ItemOption) -> httpx.Response: ...

    def body(self, opt: ItemOption) -> tuple[Item, httpx.Response]: ...

    def optional_body(self, opt: ItemOption) -> tuple[Optional[Item], httpx.Response]: ...

    def raw_bytes(self) -> tuple[bytes, httpx.Response]: ...

    def optional_bytes(self) -> tuple[Optional[bytes], httpx.Response]: ...

    def raw_string(self) -> tuple[Optional[str], httpx.Response]: ...

    def slice_builtin(self) -> tuple[list[Item], httpx.Response]: ...

    def slice_typing(self) -> tuple[List[Item], httpx.Response]: ...

    def slice_sequence(self) -> tuple[Sequence[Item], httpx.Response]: ...

    def triple(self) -> tuple[Item, Item, httpx.Response]: ...

    def unannotated(self, opt):  # noqa: ANN001, ANN201
        ...

    def unresolvable(self) -> "tuple[DoesNotExist, httpx.Response]":  # noqa: F821
        ...

    def two_args(self, first: ItemOption, second: ItemOption) -> httpx.Response: ...


# ------------------------------------------------------------------ #
# classify_method
# ------------------------------------------------------------------ #


class TestClassifyMethod:
    """Each return annotation maps to exactly one shape."""

    def test_bare_response_is_no_body(self) -> None:
        assert classify_method(FakeService.no_body) is ReturnShape.NO_BODY

    def test_model_pair_is_response_body(self) -> None:
        assert classify_method(FakeService.body) is ReturnShape.RESPONSE_BODY

    def test_optional_model_pair_is_response_body(self) -> None:
        assert classify_method(FakeService.optional_body) is ReturnShape.RESPONSE_BODY

    def test_bytes_pair_is_raw_bytes(self) -> None:
        assert classify_method(FakeService.raw_bytes) is ReturnShape.RAW_BYTES
        assert classify_method(FakeService.optional_bytes) is ReturnShape.RAW_BYTES

    def test_str_pair_is_raw_string(self) -> None:
        assert classify_method(FakeService.raw_string) is ReturnShape.RAW_STRING

    def test_list_pairs_are_slices(self) -> None:
        assert classify_method(FakeService.slice_builtin) is ReturnShape.SLICE
        assert classify_method(FakeService.slice_typing) is ReturnShape.SLICE
        assert classify_method(FakeService.slice_sequence) is ReturnShape.SLICE

    def test_three_tuple_is_no_body(self) -> None:
        assert classify_method(FakeService.triple) is ReturnShape.NO_BODY

    def test_missing_annotation_is_no_body(self) -> None:
        assert classify_method(FakeService.unannotated) is ReturnShape.NO_BODY

    def test_unresolvable_annotation_is_no_body(self) -> None:
        assert classify_method(FakeService.unresolvable) is ReturnShape.NO_BODY

    def test_classification_is_stable(self) -> None:
        shapes = {classify_method(FakeService.body) for _ in range(5)}
        assert shapes == {ReturnShape.RESPONSE_BODY}


class TestClassifySdkMethods:
    """The SDK covers every shape."""

    def test_no_body(self) -> None:
        assert classify_method(ProjectsService.delete) is ReturnShape.NO_BODY
        assert classify_method(PushService.sonarlint_events) is ReturnShape.NO_BODY

    def test_response_body(self) -> None:
        assert classify_method(ProjectsService.search) is ReturnShape.RESPONSE_BODY

    def test_raw_bytes(self) -> None:
        assert classify_method(HotspotsService.pull) is ReturnShape.RAW_BYTES

    def test_raw_string(self) -> None:
        assert classify_method(SystemService.ping) is ReturnShape.RAW_STRING
        assert classify_method(BatchService.file) is ReturnShape.RAW_STRING

    def test_slice(self) -> None:
        assert classify_method(ProjectAnalysesService.search_all) is ReturnShape.SLICE


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


class TestResponseTypeOf:
    def test_unwraps_optional(self) -> None:
        assert response_type_of(FakeService.optional_body) is Item

    def test_none_for_bare_response(self) -> None:
        assert response_type_of(FakeService.no_body) is None

    def test_sdk_method(self) -> None:
        assert response_type_of(ProjectsService.search) is ProjectsSearch

    def test_list_type_kept(self) -> None:
        assert response_type_of(ProjectAnalysesService.search_all) == list[ProjectAnalysis]


class TestOptionTypeOf:
    def test_single_parameter(self) -> None:
        assert option_type_of(FakeService.body) is ItemOption
        assert option_type_of(ProjectsService.search) is ProjectsSearchOption

    def test_no_parameter(self) -> None:
        assert option_type_of(FakeService.raw_bytes) is None

    def test_two_parameters(self) -> None:
        assert option_type_of(FakeService.two_args) is None


class TestUnwrapOptional:
    def test_optional(self) -> None:
        assert unwrap_optional(Optional[int]) is int

    def test_pep604_union(self) -> None:
        assert unwrap_optional(int | None) is int

    def test_plain_type(self) -> None:
        assert unwrap_optional(str) is str
