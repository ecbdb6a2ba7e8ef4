"""Build, export and scaffolding helpers for web component libraries."""
from __future__ import annotations

from .cli import main
from .entries import EntryPointResolver, resolve

__all__ = ["EntryPointResolver", "main", "resolve"]
