"""Propagation controller: decides per notification whether to reuse or establish a header.

Per notification::

    Start -> CacheLookup -> ReuseHeader                          -> Done
                         -> ScanSource -> (complete) Cache -> FanOut -> Done
                                       -> (partial/none)            -> Done

Store work (scan, listing, copy) is blocking and runs in worker threads; the
event loop only coordinates.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from headerprop.core.config import AppSettings
from headerprop.core.exceptions import PropagationError
from headerprop.core.protocols import IHeaderCache, IObjectStore
from headerprop.header.copier import HeaderCopier
from headerprop.header.paths import folder_prefix
from headerprop.header.scanner import PatternScanner
from headerprop.models.events import ObjectCreatedNotification
from headerprop.models.header import Header

logger = logging.getLogger(__name__)


class PropagationOrchestrator:
    """Runs batches of object-created notifications through the propagation state machine."""

    def __init__(self, *, store: IObjectStore, cache: IHeaderCache,
                 scanner: PatternScanner, copier: HeaderCopier) -> None:
        self._store = store
        self._cache = cache
        self._scanner = scanner
        self._copier = copier

    @classmethod
    def from_settings(cls, settings: AppSettings, *, store: IObjectStore,
                      cache: IHeaderCache) -> PropagationOrchestrator:
        scanner = PatternScanner.from_config(store, settings.header)
        copier = HeaderCopier.from_settings(store, scanner, settings)
        return cls(store=store, cache=cache, scanner=scanner, copier=copier)

    async def run(self, notifications: Sequence[ObjectCreatedNotification]) -> None:
        """Propagate a batch; returns once every dispatched copy finished or failed.

        Raises:
            PropagationError: if any notification or copy of the batch failed.
        """
        results = await asyncio.gather(
            *(self.propagate(n) for n in notifications), return_exceptions=True,
        )

        failures: list[BaseException] = []
        for result in results:
            if isinstance(result, BaseException):
                failures.append(result)
            else:
                failures.extend(result)

        if failures:
            for failure in failures:
                logger.error("Propagation step failed: %r", failure)
            raise PropagationError(failures)

    async def propagate(self, notification: ObjectCreatedNotification) -> list[BaseException]:
        """Run one notification; returns the failures of the copies it dispatched."""
        location = notification.location
        prefix = folder_prefix(location.path)

        cached = await self._cache.get(prefix)
        if cached is not None and cached.has_header:
            logger.info("Reusing cached header of prefix %r for %s", prefix, location.path)
            return await self._fan_out([location.path], location.container, cached)

        header = await asyncio.to_thread(self._scanner.scan, location.container, location.path)
        if not header.is_propagatable:
            logger.info("No complete header in %s/%s", location.container, location.path)
            return []

        await self._cache.set(prefix, header)
        logger.info("Added header for prefix %r into header cache", prefix)

        siblings = await asyncio.to_thread(self._list_siblings, location.container, prefix)
        logger.info("Fanning out header to %d object(s) under prefix %r", len(siblings), prefix)
        return await self._fan_out(siblings, location.container, header)

    def _list_siblings(self, container: str, prefix: str) -> list[str]:
        return list(self._store.list_objects(container, prefix))

    async def _fan_out(self, paths: Sequence[str], container: str,
                       header: Header) -> list[BaseException]:
        results = await asyncio.gather(
            *(asyncio.to_thread(self._copier.copy_with_header, path, container, header)
              for path in paths),
            return_exceptions=True,
        )
        return [r for r in results if isinstance(r, BaseException)]
