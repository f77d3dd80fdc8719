"""Spring controller records produced by the Java analyzer."""

from __future__ import annotations

from pydantic import Field

from archbase_cli.models.base import ArchbaseModel


class JavaAnnotation(ArchbaseModel):
    name: str
    value: str | None = None
    attributes: dict[str, str] | None = None


class JavaParameter(ArchbaseModel):
    name: str
    type: str
    annotations: list[JavaAnnotation] = Field(default_factory=list)


class JavaMethod(ArchbaseModel):
    """A controller method as declared. The HTTP verb is not resolved here."""

    name: str
    return_type: str
    parameters: list[JavaParameter] = Field(default_factory=list)
    annotations: list[JavaAnnotation] = Field(default_factory=list)
    modifiers: list[str] = Field(default_factory=list)


class JavaControllerAnalysis(ArchbaseModel):
    class_name: str
    base_mapping: str | None = None
    methods: list[JavaMethod] = Field(default_factory=list)
