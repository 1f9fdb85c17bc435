"""Permission graph: modules, their actions and the endpoints they unlock.

A user's grants are the actions linked to the user, grouped by the module
each action belongs to. Authorization only needs the flattened set of
endpoint templates, computed here as a pure function so it can be tested
without any web framework.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_EXPRESS_PARAMETER = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")
_ROUTE_CONVERTER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*):[^}]*\}")


@dataclass(frozen=True)
class ModuleAction:
    """One grantable action and the endpoint template it unlocks."""

    name: str
    path_endpoint: str
    description: str = ""


@dataclass(frozen=True)
class PermissionModule:
    """A functional area (crops, sales...) and the actions granted in it."""

    name: str
    actions: tuple[ModuleAction, ...] = ()


def normalize_endpoint(path: str) -> str:
    """Canonical form of an endpoint template.

    `:param` segments become `{param}` and converters such as `{id:uuid}`
    lose their type, so stored templates and routing templates compare
    equal; a trailing slash is dropped.
    """
    normalized = _ROUTE_CONVERTER.sub(r"{\1}", path.strip())
    normalized = _EXPRESS_PARAMETER.sub(r"{\1}", normalized)
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized.rstrip("/")
    return normalized


def flatten_permitted_endpoints(modules: Iterable[PermissionModule]) -> frozenset[str]:
    """Flatten module -> action -> path_endpoint into a set of templates.

    Actions without an endpoint contribute nothing.
    """
    return frozenset(
        normalize_endpoint(action.path_endpoint)
        for module in modules
        for action in module.actions
        if action.path_endpoint and action.path_endpoint.strip()
    )
