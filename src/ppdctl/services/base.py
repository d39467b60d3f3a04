"""BaseService — shared plumbing for ppdctl services.

Services receive their collaborators at construction time. The plugin
manager is optional; without one, lifecycle hooks are skipped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ppdctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes that dispatch lifecycle hooks."""

    def __init__(self, plugin_manager: PluginManager | None = None) -> None:
        self._plugins = plugin_manager

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a lifecycle hook. No-op if no plugin manager is attached.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        try:
            getattr(self._plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Hook dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Hook dispatch failed for {hook_name}")
