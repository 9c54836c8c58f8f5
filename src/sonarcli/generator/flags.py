"""Bind option-model fields to command-line flags.

Every tagged field of an SDK option model becomes one flag. A field's flag
is backed by a *slot*: a small object that parses the raw command-line text
and writes the parsed value straight into the option instance.

**Mapping rules:**

* The flag name is the kebab-case field name (``project_keys`` becomes
  ``--project-keys``).
* A flag is required when its :class:`~sonarcli.sonar.query.UrlTag` lacks
  ``omitempty``.
* Fields of an ``inline`` sub-model (e.g. the ``pagination`` block of
  ``HotspotsSearchOption``) are flattened without a prefix.
* Untagged fields and unsupported annotations are never bound.

========================  ======================  ============================
Annotation                Slot                    Command-line input
========================  ======================  ============================
``str``                   :class:`StringValue`    ``--name text``
``bool``                  :class:`BoolValue`      ``--name``
``int``                   :class:`IntValue`       ``--name 42``
``list[str]``             :class:`StringSliceValue`  ``--name a,b --name c``
``Optional[bool]``        :class:`TriStateBool`   ``--name true|false|""``
``dict[str, str]``        :class:`StringMapValue` ``--name K=V,K2=V2``
``dict[str, JsonValue]``  :class:`JSONMapValue`   ``--name '{"k": 1}'``
========================  ======================  ============================
"""

from __future__ import annotations

import json
import types
import typing
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import typer
from pydantic import BaseModel
from pydantic.fields import FieldInfo

from sonarcli.exceptions import FlagValueError, MissingFlagError
from sonarcli.models import FlagKind
from sonarcli.output import debug
from sonarcli.sonar.query import UrlTag, url_tag_of

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


def pascal_to_kebab(value: str) -> str:
    """Convert a PascalCase name to kebab-case.

    A dash goes before an uppercase letter that is not the first character
    and follows a lowercase letter, or ends an uppercase run and is followed
    by a lowercase letter::

        >>> pascal_to_kebab("ImpactSeverities")
        'impact-severities'
        >>> pascal_to_kebab("HTMLParser")
        'html-parser'
        >>> pascal_to_kebab("PciDss32")
        'pci-dss32'
    """
    out: list[str] = []
    for idx, char in enumerate(value):
        if idx > 0 and char.isupper():
            prev = value[idx - 1]
            next_is_lower = idx + 1 < len(value) and value[idx + 1].islower()
            if prev.islower() or (prev.isupper() and next_is_lower):
                out.append("-")
        out.append(char.lower())
    return "".join(out)


def kebab_case(name: str) -> str:
    """Flag or command name for a Python identifier (``from_`` becomes ``from``)."""
    return pascal_to_kebab(name.strip("_")).replace("_", "-")


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


def parse_bool(raw: str) -> bool:
    """Parse the boolean spellings accepted by Go's ``strconv.ParseBool``."""
    if raw in _TRUE_STRINGS:
        return True
    if raw in _FALSE_STRINGS:
        return False
    raise FlagValueError(f'invalid boolean value: "{raw}"')


class _Slot:
    """Writes parsed flag values into one field of an option model."""

    kind: FlagKind

    def __init__(self, target: BaseModel, field: str) -> None:
        self.target = target
        self.field = field

    def get(self) -> Any:
        return getattr(self.target, self.field)

    def _store(self, value: Any) -> None:
        setattr(self.target, self.field, value)

    def set(self, raw: Any) -> None:
        raise NotImplementedError


class StringValue(_Slot):
    kind = FlagKind.STRING

    def set(self, raw: Any) -> None:
        self._store(str(raw))


class BoolValue(_Slot):
    kind = FlagKind.BOOL

    def set(self, raw: Any) -> None:
        self._store(raw if isinstance(raw, bool) else parse_bool(str(raw)))


class IntValue(_Slot):
    kind = FlagKind.INT

    def set(self, raw: Any) -> None:
        if isinstance(raw, int) and not isinstance(raw, bool):
            self._store(raw)
            return
        try:
            self._store(int(str(raw), 0))
        except ValueError:
            raise FlagValueError(f'invalid integer value: "{raw}"') from None


class StringSliceValue(_Slot):
    """Comma-separated list; the first value replaces the default, later ones append."""

    kind = FlagKind.STRING_LIST

    def __init__(self, target: BaseModel, field: str) -> None:
        super().__init__(target, field)
        self.changed = False

    def set(self, raw: Any) -> None:
        text = str(raw)
        items = text.split(",") if text else []
        if self.changed:
            self._store([*self.get(), *items])
        else:
            self._store(items)
        self.changed = True


class TriStateBool(_Slot):
    """``true``, ``false`` or unset (``""``), for ``Optional[bool]`` fields."""

    kind = FlagKind.TRI_STATE_BOOL

    def __init__(self, target: BaseModel, field: str) -> None:
        super().__init__(target, field)
        self.touched = False

    def set(self, raw: Any) -> None:
        self.touched = True
        if isinstance(raw, bool):
            self._store(raw)
            return
        text = str(raw)
        if text == "true":
            self._store(True)
        elif text == "false":
            self._store(False)
        elif text == "":
            self._store(None)
        else:
            raise FlagValueError(f'invalid boolean value: "{text}" (must be true, false, or empty)')


class StringMapValue(_Slot):
    """``KEY=VALUE`` pairs separated by commas."""

    kind = FlagKind.STRING_MAP

    def set(self, raw: Any) -> None:
        text = str(raw)
        if text == "":
            return

        result: dict[str, str] = {}
        for pair in text.split(","):
            key, sep, value = pair.partition("=")
            if not sep:
                raise FlagValueError(f'invalid key=value pair: "{pair}"')
            key = key.strip()
            if not key:
                raise FlagValueError(f'empty key in pair: "{pair}"')
            result[key] = value.strip()
        self._store(result)


class JSONMapValue(_Slot):
    """A single JSON object literal."""

    kind = FlagKind.JSON_MAP

    def set(self, raw: Any) -> None:
        text = str(raw)
        if text == "":
            return
        try:
            value = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FlagValueError(f"invalid JSON: {exc}") from exc
        if not isinstance(value, dict):
            raise FlagValueError(f"invalid JSON: expected an object, got {type(value).__name__}")
        self._store(value)


_SLOT_TYPES: dict[FlagKind, type[_Slot]] = {
    FlagKind.STRING: StringValue,
    FlagKind.BOOL: BoolValue,
    FlagKind.INT: IntValue,
    FlagKind.STRING_LIST: StringSliceValue,
    FlagKind.TRI_STATE_BOOL: TriStateBool,
    FlagKind.STRING_MAP: StringMapValue,
    FlagKind.JSON_MAP: JSONMapValue,
}


def flag_kind_of(annotation: Any) -> Optional[FlagKind]:
    """Return the :class:`FlagKind` for a field annotation, or ``None`` if unsupported."""
    if annotation is str:
        return FlagKind.STRING
    if annotation is bool:
        return FlagKind.BOOL
    if annotation is int:
        return FlagKind.INT

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)
    if origin is list and args == (str,):
        return FlagKind.STRING_LIST
    if origin in (Union, types.UnionType) and set(args) == {bool, type(None)}:
        return FlagKind.TRI_STATE_BOOL
    if origin is dict and len(args) == 2 and args[0] is str:
        return FlagKind.STRING_MAP if args[1] is str else FlagKind.JSON_MAP
    return None


# ---------------------------------------------------------------------------
# Bindings
# ---------------------------------------------------------------------------


@dataclass
class FlagBinding:
    """One flag bound to one option field.

    Attributes:
        name: Flag name without dashes, e.g. ``project-keys``.
        required: Whether the flag must be given.
        field_path: Dotted path of the field inside the option model,
            e.g. ``pagination.page``.
        kind: The field's :class:`FlagKind`.
        slot: The slot that writes parsed values into the model.
        help: Help text shown by ``--help``.
    """

    name: str
    required: bool
    field_path: str
    kind: FlagKind
    slot: _Slot
    help: str = ""


class FlagSet:
    """Ordered collection of :class:`FlagBinding` for one command."""

    def __init__(self) -> None:
        self.bindings: dict[str, FlagBinding] = {}
        self._required: set[str] = set()

    def __iter__(self) -> typing.Iterator[FlagBinding]:
        return iter(self.bindings.values())

    def __len__(self) -> int:
        return len(self.bindings)

    def __contains__(self, name: object) -> bool:
        return name in self.bindings

    def add(self, binding: FlagBinding) -> None:
        if binding.name in self.bindings:
            raise ValueError(f"flag redefined: {binding.name}")
        self.bindings[binding.name] = binding

    def lookup(self, name: str) -> Optional[FlagBinding]:
        return self.bindings.get(name)

    def mark_required(self, name: str) -> None:
        self._required.add(name)

    def is_required(self, name: str) -> bool:
        return name in self._required

    def apply(self, values: Mapping[str, Any]) -> None:
        """Feed parsed command-line values, keyed by flag name, into the slots.

        ``None`` and empty lists mean the flag was not given. List values
        are fed item by item so repeated flags append.

        Raises:
            MissingFlagError: A required flag has no value.
            FlagValueError: A slot rejected its input.
        """
        for name, binding in self.bindings.items():
            value = values.get(name)
            if value is None or (isinstance(value, (list, tuple)) and not value):
                if self.is_required(name):
                    raise MissingFlagError(f'required flag "--{name}" not set')
                continue

            items = value if isinstance(value, (list, tuple)) else [value]
            for item in items:
                try:
                    binding.slot.set(item)
                except FlagValueError as exc:
                    raise FlagValueError(f'invalid argument "{item}" for "--{name}" flag: {exc}') from exc


def _help_text(info: FieldInfo, tag: UrlTag) -> str:
    parts = [info.description.rstrip(".")] if info.description else []
    parts.append(f"API parameter: {tag.name}")
    return ". ".join(parts)


def bind_flags(flag_set: FlagSet, opt: BaseModel, prefix: str = "") -> None:
    """Create a flag for every tagged field of *opt*, in declaration order.

    The slots write into *opt* itself, so bind against a fresh instance for
    every invocation.

    Args:
        flag_set: Receives the bindings.
        opt: Option model instance.
        prefix: Prepended to flag names as ``prefix-name`` when not empty.
    """
    _bind(flag_set, opt, prefix, "")


def _bind(flag_set: FlagSet, opt: BaseModel, prefix: str, path: str) -> None:
    model = type(opt)
    for field_name, info in model.model_fields.items():
        if field_name.startswith("_"):
            continue

        tag = url_tag_of(model, field_name)
        value = getattr(opt, field_name)
        field_path = f"{path}.{field_name}" if path else field_name

        if tag is not None and tag.inline and isinstance(value, BaseModel):
            _bind(flag_set, value, prefix, field_path)
            continue
        if tag is None:
            continue

        kind = flag_kind_of(info.annotation)
        if kind is None:
            debug(f"{model.__name__}.{field_name}: unsupported type {info.annotation!r}, no flag")
            continue

        name = kebab_case(field_name)
        if prefix:
            name = f"{prefix}-{name}"

        binding = FlagBinding(
            name=name,
            required=not tag.omitempty,
            field_path=field_path,
            kind=kind,
            slot=_SLOT_TYPES[kind](opt, field_name),
            help=_help_text(info, tag),
        )
        flag_set.add(binding)
        if binding.required:
            flag_set.mark_required(name)


# ---------------------------------------------------------------------------
# Typer parameters
# ---------------------------------------------------------------------------

_METAVARS: dict[FlagKind, str] = {
    FlagKind.TRI_STATE_BOOL: "true|false",
    FlagKind.STRING_MAP: "KEY=VAL,...",
    FlagKind.JSON_MAP: "JSON",
}


def typer_option_for(binding: FlagBinding) -> tuple[Any, Any]:
    """Return the ``(annotation, typer.Option)`` pair declaring *binding*.

    Values stay raw text where a slot does the parsing, so the generated
    command can hand them to :meth:`FlagSet.apply` unchanged.
    """
    flag = f"--{binding.name}"
    help_text = binding.help or None

    if binding.kind is FlagKind.BOOL:
        return bool, typer.Option(... if binding.required else False, flag, help=help_text)

    default = ... if binding.required else None
    if binding.kind is FlagKind.INT:
        return Optional[int], typer.Option(default, flag, help=help_text)
    if binding.kind is FlagKind.STRING_LIST:
        return Optional[list[str]], typer.Option(default, flag, help=help_text)
    return Optional[str], typer.Option(default, flag, help=help_text, metavar=_METAVARS.get(binding.kind))
