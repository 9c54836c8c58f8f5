"""Query-string encoding for SDK option models.

Option models are pydantic models whose fields carry a :class:`UrlTag` in
their ``Annotated`` metadata::

    class ProjectsDeleteOption(BaseModel):
        project: Annotated[str, UrlTag("project")] = ""
        branch: Annotated[str, UrlTag("branch,omitempty")] = ""

The tag names the query parameter and lists its options:

* ``omitempty`` -- zero values (``""``, ``0``, ``False``, ``None``, empty
  containers) are left out of the query.
* ``comma`` -- list values are joined with ``,`` into a single parameter
  instead of repeating the key.
* ``inline`` -- a nested option model whose own tagged fields are emitted
  at the top level.

Fields without a tag are never encoded. The same tags drive flag generation
in :mod:`sonarcli.generator.flags`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel

MAP_ENTRY_SEPARATOR = ";"
MAP_KEY_VALUE_SEPARATOR = "="


@dataclass(frozen=True)
class UrlTag:
    """Serialization tag of an option field, e.g. ``UrlTag("ps,omitempty")``."""

    spec: str
    name: str = field(init=False)
    options: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        name, _, rest = self.spec.partition(",")
        options = frozenset(opt.strip() for opt in rest.split(",") if opt.strip())
        object.__setattr__(self, "name", name.strip())
        object.__setattr__(self, "options", options)

    @property
    def omitempty(self) -> bool:
        return "omitempty" in self.options

    @property
    def comma(self) -> bool:
        return "comma" in self.options

    @property
    def inline(self) -> bool:
        return "inline" in self.options


def url_tag_of(model: type[BaseModel], field_name: str) -> Optional[UrlTag]:
    """Return the :class:`UrlTag` attached to *field_name* of *model*, if any."""
    info = model.model_fields.get(field_name)
    if info is None:
        return None
    for meta in info.metadata:
        if isinstance(meta, UrlTag):
            return meta
    return None


def map_to_separated_string(
    values: dict[str, str],
    entry_separator: str = MAP_ENTRY_SEPARATOR,
    key_value_separator: str = MAP_KEY_VALUE_SEPARATOR,
) -> str:
    """Join a string map as ``k=v;k2=v2`` (separators configurable)."""
    return entry_separator.join(f"{key}{key_value_separator}{value}" for key, value in values.items())


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict, set)):
        return len(value) == 0
    return False


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _encode_field(tag: UrlTag, value: Any) -> list[tuple[str, str]]:
    if tag.omitempty and _is_zero(value):
        return []

    if isinstance(value, (list, tuple)):
        if tag.comma:
            return [(tag.name, ",".join(_scalar(item) for item in value))]
        return [(tag.name, _scalar(item)) for item in value]

    if isinstance(value, dict):
        if all(isinstance(item, str) for item in value.values()):
            return [(tag.name, map_to_separated_string(value))]
        return [(tag.name, json.dumps(value, separators=(",", ":")))]

    return [(tag.name, _scalar(value))]


def encode_query(opt: Optional[BaseModel]) -> list[tuple[str, str]]:
    """Encode an option model into ordered query parameters.

    Args:
        opt: The option model instance, or ``None`` for no parameters.

    Returns:
        ``(name, value)`` pairs in field declaration order, suitable for
        ``httpx`` ``params``. Repeated keys are kept as separate pairs.
    """
    if opt is None:
        return []

    params: list[tuple[str, str]] = []
    for name in type(opt).model_fields:
        tag = url_tag_of(type(opt), name)
        if tag is None:
            continue
        value = getattr(opt, name)
        if tag.inline and isinstance(value, BaseModel):
            params.extend(encode_query(value))
            continue
        params.extend(_encode_field(tag, value))
    return params
