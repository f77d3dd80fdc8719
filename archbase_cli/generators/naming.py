"""Identifier casing shared by generators and template helpers."""

from __future__ import annotations

import re

_UPPER_RE = re.compile(r"[A-Z]")
_SEPARATOR_RE = re.compile(r"[-_\s]+")


def capitalize_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def lower_first(value: str) -> str:
    return value[:1].lower() + value[1:]


def kebab_case(value: str) -> str:
    """``UserManagement`` -> ``user-management``. Only the first letter is not prefixed."""
    return _UPPER_RE.sub(
        lambda m: m.group(0).lower() if m.start() == 0 else "-" + m.group(0).lower(),
        value,
    )


def pascal_case(value: str) -> str:
    """``my-app`` / ``my_app`` -> ``MyApp``."""
    return "".join(capitalize_first(part) for part in _SEPARATOR_RE.split(value) if part)


def camel_case(value: str) -> str:
    return lower_first(pascal_case(value))


def strip_suffix(value: str, suffix: str) -> str:
    return value[: -len(suffix)] if suffix and value.endswith(suffix) else value


def feature_name(component_name: str, suffix: str) -> str:
    """``ClienteView`` with suffix ``View`` -> ``cliente``."""
    return kebab_case(strip_suffix(component_name, suffix))


def admin_route(category: str, feature: str) -> str:
    return f"/admin/{category}/{feature}"
