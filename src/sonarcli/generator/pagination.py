"""Fetch every page of a paginated SDK method and merge the results.

Paginated methods take an option model carrying :class:`PaginationArgs`
(``p`` / ``ps`` on the wire) and return a model with a collection field
and a ``paging`` block (``pageIndex``, ``pageSize``, ``total``).
:func:`paginate_all` walks the pages at the maximum page size and returns
the first page's model with the collection replaced by every item seen.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel

from sonarcli.generator.invoker import invoke_method, service_label
from sonarcli.generator.shapes import unwrap_optional
from sonarcli.models import ReturnShape
from sonarcli.output import debug
from sonarcli.sonar.common import MAX_PAGE_SIZE, PaginationArgs
from sonarcli.sonar.query import url_tag_of


def _is_model(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseModel)


def has_pagination(opt_type: Any) -> bool:
    """Whether *opt_type* is, or inlines, :class:`PaginationArgs`."""
    if not _is_model(opt_type):
        return False
    if issubclass(opt_type, PaginationArgs):
        return True
    for name, info in opt_type.model_fields.items():
        tag = url_tag_of(opt_type, name)
        annotation = unwrap_optional(info.annotation)
        if tag is not None and tag.inline and _is_model(annotation) and issubclass(annotation, PaginationArgs):
            return True
    return False


def response_has_paging(response_type: Any) -> bool:
    """Whether the response model declares a ``paging`` field."""
    return _is_model(response_type) and "paging" in response_type.model_fields


def find_collection_field(response_type: Any) -> Optional[str]:
    """Name of the first field annotated as a list of models, if any."""
    if not _is_model(response_type):
        return None
    for name, info in response_type.model_fields.items():
        annotation = unwrap_optional(info.annotation)
        if typing.get_origin(annotation) is not list:
            continue
        args = typing.get_args(annotation)
        if args and _is_model(args[0]):
            return name
    return None


def _set_page_field(opt: BaseModel, field_name: str, value: int) -> bool:
    """Set a :class:`PaginationArgs` field on *opt* or on its inline sub-model."""
    if isinstance(opt, PaginationArgs):
        setattr(opt, field_name, value)
        return True
    for name in type(opt).model_fields:
        tag = url_tag_of(type(opt), name)
        sub = getattr(opt, name)
        if tag is not None and tag.inline and isinstance(sub, BaseModel) and _set_page_field(sub, field_name, value):
            return True
    return False


@dataclass
class _PaginationState:
    page: int = 1
    page_size: int = MAX_PAGE_SIZE
    items: list[Any] = field(default_factory=list)
    snapshot: Optional[BaseModel] = None


def paginate_all(
    service: object,
    name: str,
    opt: BaseModel,
    shape: ReturnShape,
    response_type: Any,
) -> Any:
    """Call ``service.<name>`` page after page and merge the collections.

    Pages are requested at :data:`MAX_PAGE_SIZE` starting from page 1; any
    page or page size already set on *opt* is overridden. The loop stops
    when a page comes back as ``None``, when the response carries no paging
    block, or when the merged items reach the reported total. Short or
    empty pages keep the loop going.

    Args:
        service: The service instance.
        name: Method name.
        opt: Option model, mutated in place with the page being fetched.
        shape: The method's return shape.
        response_type: The model the method returns.

    Returns:
        The first page's model with its collection holding all items, its
        ``paging.page_index`` set to 1 and ``paging.page_size`` to the
        item count. Without a collection field, the single call's value.

    Raises:
        InvocationError: A page failed; no partial result is returned.
    """
    collection = find_collection_field(response_type)
    if collection is None:
        return invoke_method(service, name, opt, shape, True).value

    label = f"{service_label(service)}.{name}"
    state = _PaginationState()
    _set_page_field(opt, "page_size", state.page_size)

    while True:
        _set_page_field(opt, "page", state.page)
        value, _ = invoke_method(service, name, opt, shape, True)
        if value is None:
            break

        if state.snapshot is None:
            state.snapshot = value
        page_items = getattr(value, collection) or []
        state.items.extend(page_items)

        paging = getattr(value, "paging", None)
        total = paging.total if paging is not None else len(state.items)
        debug(f"{label}: page {state.page}, {len(page_items)} items ({len(state.items)}/{total})")

        if paging is None or len(state.items) >= paging.total:
            break
        state.page += 1

    if state.snapshot is None:
        return None

    setattr(state.snapshot, collection, state.items)
    paging = getattr(state.snapshot, "paging", None)
    if paging is not None:
        paging.page_index = 1
        paging.page_size = len(state.items)
    return state.snapshot
