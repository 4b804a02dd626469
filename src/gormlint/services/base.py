"""BaseService — foundation for gormlint services.

Every service receives the resolved settings and, optionally, a loaded
plugin manager whose hooks it dispatches after each operation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gormlint.config.settings import GormlintSettings
    from gormlint.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class LintService(BaseService):
            def lint_text(self, text: str) -> ServiceResult:
                ...
    """

    def __init__(
        self,
        settings: GormlintSettings | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        if settings is None:
            from gormlint.config.settings import GormlintSettings

            settings = GormlintSettings()
        self._settings = settings
        self._plugins = plugins

    @property
    def settings(self) -> GormlintSettings:
        return self._settings

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call plugin hook *hook_name*. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        try:
            getattr(self._plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Hook dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
