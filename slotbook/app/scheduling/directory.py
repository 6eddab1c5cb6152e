from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from slotbook.app.scheduling.catalog import WorkingWindow


@dataclass(frozen=True)
class Resource:
    id: str
    window: WorkingWindow
    active: bool = True


class ResourceDirectory(Protocol):
    def get(self, resource_id: str) -> Resource | None: ...


class StaticResourceDirectory:
    """Read-only directory over a fixed set of resources."""

    def __init__(self, resources: Iterable[Resource]) -> None:
        self._resources = {resource.id: resource for resource in resources}

    def get(self, resource_id: str) -> Resource | None:
        return self._resources.get(resource_id)
