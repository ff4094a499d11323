"""Shared type aliases."""

from __future__ import annotations

from typing import TypeAlias

# JSON-like dict
JsonDict: TypeAlias = dict[str, object]
