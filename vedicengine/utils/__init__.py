"""Shared numeric helpers."""

from __future__ import annotations

from .angles import EPSILON_DEG, ensure_finite, norm360, shortest_separation

__all__ = ["EPSILON_DEG", "ensure_finite", "norm360", "shortest_separation"]
