"""Helper and partial registries.

A ``Registry`` is owned by the host application (usually through a
``TemplateEngine``) and injected into the renderer, rather than living in a
module-level global.  Registration overwrites silently; lookups consult the
per-render override mapping first and fall back to the registry.

No locking is performed: register helpers and partials once at start-up,
before renders run concurrently.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable, Generic, Optional, TypeVar

from .helpers import BUILTIN_HELPERS

T = TypeVar("T")

HelperFn = Callable[..., Any]


class _NamedStore(ABC, Generic[T]):
    """Name -> value store where the last registration wins."""

    kind = "entry"

    def __init__(self) -> None:
        self._entries: dict[str, T] = {}

    @abstractmethod
    def _check(self, value: Any) -> None:
        """Raise if *value* cannot be stored."""

    def register(self, name: str, value: T) -> None:
        key = name.strip() if isinstance(name, str) else ""
        if not key:
            raise ValueError(f"{self.kind} name cannot be empty.")
        self._check(value)
        self._entries[key] = value

    def unregister(self, name: str) -> bool:
        """Remove *name*; returns ``False`` if it was not registered."""
        return self._entries.pop(name, None) is not None

    def get(self, name: str) -> Optional[T]:
        return self._entries.get(name)

    def lookup(self, name: str, overrides: Optional[Mapping[str, T]] = None) -> Optional[T]:
        """Resolve *name* from *overrides* first, then from this store."""
        if overrides and name in overrides:
            return overrides[name]
        return self._entries.get(name)

    def names(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class HelperRegistry(_NamedStore[HelperFn]):
    """Named transform functions invocable as ``{{#name args}}``."""

    kind = "helper"

    def _check(self, value: Any) -> None:
        if not callable(value):
            raise TypeError(f"helper must be callable, got {type(value).__name__}.")


class PartialRegistry(_NamedStore[str]):
    """Named sub-templates expanded by ``{{> name}}``."""

    kind = "partial"

    def _check(self, value: Any) -> None:
        if not isinstance(value, str):
            raise TypeError(f"partial must be a string, got {type(value).__name__}.")


class Registry:
    """The pair of registries a renderer reads from."""

    def __init__(
        self,
        helpers: Optional[HelperRegistry] = None,
        partials: Optional[PartialRegistry] = None,
    ) -> None:
        self.helpers = helpers if helpers is not None else HelperRegistry()
        self.partials = partials if partials is not None else PartialRegistry()

    @classmethod
    def with_builtins(cls) -> "Registry":
        """A registry pre-seeded with the built-in helpers."""
        registry = cls()
        for name, fn in BUILTIN_HELPERS.items():
            registry.register_helper(name, fn)
        return registry

    def register_helper(self, name: str, fn: HelperFn) -> None:
        self.helpers.register(name, fn)

    def register_partial(self, name: str, template: str) -> None:
        self.partials.register(name, template)

    def lookup_helper(
        self, name: str, overrides: Optional[Mapping[str, HelperFn]] = None
    ) -> Optional[HelperFn]:
        return self.helpers.lookup(name, overrides)

    def lookup_partial(
        self, name: str, overrides: Optional[Mapping[str, str]] = None
    ) -> Optional[str]:
        return self.partials.lookup(name, overrides)
