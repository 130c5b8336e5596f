"""HTTP routers."""

from __future__ import annotations

from . import system, vedic

__all__ = ["system", "vedic"]
