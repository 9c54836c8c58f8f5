"""Classify SDK methods by the shape of their return annotation.

Every service method either returns the bare :class:`httpx.Response`, or a
``(value, response)`` pair. The first element of the pair decides how the
CLI renders the result:

============================================  =============================
Return annotation                             Shape
============================================  =============================
``httpx.Response`` (or anything not a pair)   :attr:`ReturnShape.NO_BODY`
``tuple[bytes, httpx.Response]``              :attr:`ReturnShape.RAW_BYTES`
``tuple[list[X], httpx.Response]``            :attr:`ReturnShape.SLICE`
``tuple[str, httpx.Response]``                :attr:`ReturnShape.RAW_STRING`
``tuple[Model, httpx.Response]``              :attr:`ReturnShape.RESPONSE_BODY`
============================================  =============================

``Optional[...]`` around the first element is ignored.
"""

from __future__ import annotations

import collections.abc
import inspect
import types
import typing
from typing import Any, Callable, Optional, Union

from sonarcli.models import ReturnShape

_LIST_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)


def unwrap_optional(annotation: Any) -> Any:
    """Strip ``None`` from a ``Optional[X]`` / ``X | None`` annotation."""
    if typing.get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _type_hints(func: Callable[..., Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except Exception:  # noqa: BLE001 -- unresolvable annotations classify as no body
        return {}


def _pair_elements(func: Callable[..., Any]) -> Optional[tuple[Any, ...]]:
    annotation = _type_hints(func).get("return")
    if typing.get_origin(annotation) is not tuple:
        return None
    args = typing.get_args(annotation)
    if len(args) != 2:
        return None
    return args


def classify_method(func: Callable[..., Any]) -> ReturnShape:
    """Return the :class:`ReturnShape` of *func* from its return annotation.

    Never raises: a missing or unresolvable annotation is ``NO_BODY``.
    """
    elements = _pair_elements(func)
    if elements is None:
        return ReturnShape.NO_BODY

    first = unwrap_optional(elements[0])
    if first is bytes:
        return ReturnShape.RAW_BYTES
    if first in _LIST_ORIGINS or typing.get_origin(first) in _LIST_ORIGINS:
        return ReturnShape.SLICE
    if first is str:
        return ReturnShape.RAW_STRING
    return ReturnShape.RESPONSE_BODY


def response_type_of(func: Callable[..., Any]) -> Any:
    """Return the value type of a ``(value, response)`` method, or ``None``."""
    elements = _pair_elements(func)
    if elements is None:
        return None
    return unwrap_optional(elements[0])


def option_type_of(func: Callable[..., Any]) -> Any:
    """Return the annotated type of the single non-``self`` parameter.

    ``None`` when the method takes no argument or more than one.
    """
    params = [name for name in inspect.signature(func).parameters if name != "self"]
    if len(params) != 1:
        return None
    return unwrap_optional(_type_hints(func).get(params[0]))
