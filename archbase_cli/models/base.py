"""Base model and JSON export helpers shared by all analysis records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

M = TypeVar("M", bound=BaseModel)


class ArchbaseModel(BaseModel):
    """Snake_case attributes in Python, camelCase keys in JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def to_json(record: BaseModel) -> str:
    return record.model_dump_json(by_alias=True, indent=2)


def export_json(record: BaseModel, output_path: str | Path) -> Path:
    """Write *record* as 2-space indented camelCase JSON, creating parent dirs."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(record) + "\n", encoding="utf-8")
    return path


def load_json(model_cls: type[M], input_path: str | Path) -> M:
    return model_cls.model_validate_json(Path(input_path).read_text(encoding="utf-8"))


def to_json_list(records: list[BaseModel]) -> str:
    return json.dumps([r.model_dump(mode="json", by_alias=True) for r in records], indent=2)


def export_json_list(records: list[BaseModel], output_path: str | Path) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json_list(records) + "\n", encoding="utf-8")
    return path
