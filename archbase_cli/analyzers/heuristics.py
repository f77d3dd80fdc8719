"""Heuristic classifiers: component complexity and DataSource version."""

from __future__ import annotations

from archbase_cli.models.component import Complexity, DataSourceVersion

# DataSource V2 adds array-field mutation.
V2_METHODS = frozenset({"appendToFieldArray", "updateFieldArrayItem", "removeFromFieldArray"})

LOW_COMPLEXITY_MAX = 5
MEDIUM_COMPLEXITY_MAX = 15
DATASOURCE_WEIGHT = 2


def classify_data_source_member(current: DataSourceVersion, member: str) -> DataSourceVersion:
    """Fold one ``dataSource.<member>`` access into the running version.

    A V2 method always yields ``v2``; any other member yields ``v1`` only
    while nothing has been decided yet.
    """
    if member in V2_METHODS:
        return "v2"
    if current == "unknown":
        return "v1"
    return current


def complexity_score(props: int, hooks: int, dependencies: int, has_data_source: bool) -> int:
    return props + hooks + dependencies + (DATASOURCE_WEIGHT if has_data_source else 0)


def classify_complexity(score: int) -> Complexity:
    if score <= LOW_COMPLEXITY_MAX:
        return "low"
    if score <= MEDIUM_COMPLEXITY_MAX:
        return "medium"
    return "high"
