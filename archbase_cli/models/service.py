"""Service method records derived from controller methods."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from archbase_cli.models.base import ArchbaseModel

ParameterSource = Literal["path", "query", "body"]
HttpMethod = Literal["get", "post", "put", "delete", "patch"]


class ServiceParameter(ArchbaseModel):
    name: str
    type: str
    source: ParameterSource


class ServiceMethod(ArchbaseModel):
    name: str
    http_method: HttpMethod
    return_type: str
    parameters: list[ServiceParameter] = Field(default_factory=list)
    endpoint: str
