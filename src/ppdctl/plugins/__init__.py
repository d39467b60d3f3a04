"""Plugin system — pluggy lifecycle hooks for paperdoll changes."""

from __future__ import annotations

import pluggy

hookimpl = pluggy.HookimplMarker("ppdctl")

__all__ = ["hookimpl"]
