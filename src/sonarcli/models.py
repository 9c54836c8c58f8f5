"""Canonical Pydantic models shared across the sonarcli modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
or resolved from flags and environment variables at startup:
    :class:`OutputConfig`, :class:`GlobalConfig`, and
    :class:`ConnectionSettings`.

**Command descriptor models** -- produced by reflecting over the SDK and
consumed by the command-tree generator:
    :class:`ReturnShape`, :class:`FlagKind`, and :class:`MethodDescriptor`.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output preferences stored in :class:`GlobalConfig`."""

    format: Literal["json", "yaml", "table"] = Field(default="json", description="Output format: json, yaml, table")
    no_color: bool = Field(default=False, description="Disable coloured diagnostics")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/sonar-cli/config.json``.

    Loaded and saved by :func:`~sonarcli.config.load_global_config` and
    :func:`~sonarcli.config.save_global_config`. Fields here have the
    lowest precedence and are overridden by environment variables and CLI
    flags. Credentials are deliberately absent: tokens and passwords only
    come from flags or the environment.
    """

    url: Optional[str] = Field(default=None, description="SonarQube server URL")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    output: OutputConfig = Field(default_factory=OutputConfig)


class ConnectionSettings(BaseModel):
    """Effective connection settings after precedence resolution.

    Built by :func:`~sonarcli.config.resolve_settings` and used to create
    the :class:`~sonarcli.sonar.SonarClient` for a command invocation.
    """

    url: Optional[str] = None
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: float = 30.0


# --- Command descriptors ---


class ReturnShape(str, enum.Enum):
    """How a service method hands back its result.

    ``NO_BODY`` methods return only the transport response. The other
    shapes return a ``(value, response)`` pair and differ in what the value
    is: a decoded model, raw bytes, raw text, or a list of models.
    """

    NO_BODY = "no_body"
    RESPONSE_BODY = "response_body"
    RAW_BYTES = "raw_bytes"
    RAW_STRING = "raw_string"
    SLICE = "slice"


class FlagKind(str, enum.Enum):
    """Semantic kind of an option field, which selects its flag parser."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    STRING_LIST = "string_list"
    TRI_STATE_BOOL = "tri_state_bool"
    STRING_MAP = "string_map"
    JSON_MAP = "json_map"


class MethodDescriptor(BaseModel):
    """Everything the command tree needs to know about one service method.

    Created once by :func:`~sonarcli.generator.command_tree.describe_method`
    at registration time and immutable afterwards.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service: str = Field(description="Attribute name of the service on the client")
    service_type: str = Field(description="Class name of the service, without 'Service'")
    method: str
    option_type: Optional[type[BaseModel]] = None
    response_type: Any = None
    shape: ReturnShape
    paginated: bool = False
    streaming: bool = False
    func: Any = None

    @property
    def key(self) -> str:
        """``service.method`` identifier, e.g. ``push.sonarlint_events``."""
        return f"{self.service}.{self.method}"

    @property
    def has_option(self) -> bool:
        """Whether the method takes an option model argument."""
        return self.option_type is not None
