"""Typed client for the SonarQube web API.

Each endpoint group is a :class:`Service` reachable as an attribute of
:class:`SonarClient`. Service methods take a pydantic option model and
return either the bare :class:`httpx.Response` or a ``(value, response)``
pair.
"""

from sonarcli.sonar.client import DEFAULT_BASE_URL, SonarClient, check_response, parse_error
from sonarcli.sonar.common import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    PaginationArgs,
    Paging,
    SonarModel,
)
from sonarcli.sonar.query import UrlTag, encode_query, map_to_separated_string, url_tag_of
from sonarcli.sonar.service import Service

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MIN_PAGE_SIZE",
    "PaginationArgs",
    "Paging",
    "Service",
    "SonarClient",
    "SonarModel",
    "UrlTag",
    "check_response",
    "encode_query",
    "map_to_separated_string",
    "parse_error",
    "url_tag_of",
]
