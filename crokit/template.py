"""Placeholder resolution for scaffolding templates."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
import re


_PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


class TemplateError(ValueError):
    """Raised when template resolution fails."""


@dataclass(slots=True)
class TemplateResolver:
    """Renders ``{{dotted.path}}`` placeholders from a nested mapping context.

    Values found in the context may contain placeholders of their own; those
    are resolved recursively and memoized per path. A placeholder that refers
    back to itself, directly or through other paths, raises
    :class:`TemplateError`.
    """

    context: Mapping[str, Any]
    _cache: dict[str, str] = field(default_factory=dict, init=False, repr=False)

    def render(self, text: str) -> str:
        return self._substitute(text, stack=[])

    def lookup(self, path: str) -> str:
        return self._resolve_path(path.strip(), stack=[])

    def clear_cache(self) -> None:
        self._cache.clear()

    def _substitute(self, text: str, *, stack: list[str]) -> str:
        def replacement(match: re.Match[str]) -> str:
            return self._resolve_path(match.group(1).strip(), stack=stack)

        if not _PLACEHOLDER_PATTERN.search(text):
            return text
        return _PLACEHOLDER_PATTERN.sub(replacement, text)

    def _resolve_path(self, path: str, *, stack: list[str]) -> str:
        if path in self._cache:
            return self._cache[path]
        if path in stack:
            cycle = " -> ".join(stack + [path])
            raise TemplateError(f"Circular dependency detected: {cycle}")

        raw_value = self._lookup_raw(path)
        if isinstance(raw_value, (Mapping, list, tuple)):
            raise TemplateError(f"Placeholder '{path}' does not refer to a scalar value")

        stack.append(path)
        resolved = self._substitute("" if raw_value is None else str(raw_value), stack=stack)
        stack.pop()
        self._cache[path] = resolved
        return resolved

    def _lookup_raw(self, path: str) -> Any:
        current: Any = self.context
        for part in path.split("."):
            if isinstance(current, Mapping) and part in current:
                current = current[part]
                continue
            raise TemplateError(f"Cannot resolve path '{path}' in template context")
        return current


def extract_placeholders(text: str) -> set[str]:
    """Collect all placeholder paths referenced within *text*."""

    return {match.group(1).strip() for match in _PLACEHOLDER_PATTERN.finditer(text) if match.group(1).strip()}


def render_template(text: str, context: Mapping[str, Any]) -> str:
    return TemplateResolver(context).render(text)


__all__ = ["TemplateError", "TemplateResolver", "extract_placeholders", "render_template"]
