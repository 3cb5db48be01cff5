import logging
from typing import Iterable, Optional

from jargon.rules.config import Config
from jargon.rules.glossary import Source, compile_glossary, ensure_not_empty

from .resolver import Resolution, resolve
from .store import GlossaryStore

logger = logging.getLogger(__name__)


class GlossaryHandle:
    """
    Process-wide reference to the current glossary store.

    Reloads build a complete new store first and then swap the reference, so
    a resolve sees either the old or the new store, never a partial one.
    """

    def __init__(self, store: Optional[GlossaryStore] = None):
        self._store = store or GlossaryStore()

    @property
    def store(self) -> GlossaryStore:
        return self._store

    def replace(self, store: GlossaryStore) -> GlossaryStore:
        """Install ``store`` and return the previous one."""
        previous = self._store
        self._store = store
        return previous

    def reload(
        self, sources: Iterable[Source], config: Optional[Config] = None
    ) -> GlossaryStore:
        """Recompile from ``sources`` and swap in the result.

        Raises:
            EmptyGlossaryError: no glossary documents were found; the current
                store is left in place
        """
        sources = list(sources)
        store = ensure_not_empty(compile_glossary(sources, config), sources)
        self.replace(store)
        logger.info(f"Glossary reloaded from {len(sources)} source(s)")
        return store

    def resolve(self, word: str, path: str) -> Optional[Resolution]:
        return resolve(self._store, word, path)

    def mark_known(self, namespace: str, term: str) -> bool:
        return self._store.mark_known(namespace, term)
