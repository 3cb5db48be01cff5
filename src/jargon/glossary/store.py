import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

from .definitions import TermDefinition

logger = logging.getLogger(__name__)

GLOBAL_NAMESPACE = "global"


class JargonError(Exception):
    """Base class for glossary engine errors."""


class EmptyGlossaryError(JargonError):
    def __init__(self, sources: Optional[List[str]] = None):
        self.sources = list(sources or [])
        super().__init__(
            "No .jargon.yml or .jargon.known.yml files were found in: "
            f"{', '.join(self.sources) or '(no sources)'}"
        )


@dataclass
class Term:
    """
    One queryable glossary entry.

    A defined term with aliases is stored as several entries: one for the
    defined name and one per alias. They share the description and list each
    other in ``aka``.
    """

    name: str
    lookup_key: str
    aka: List[str] = field(default_factory=list)
    description: Optional[str] = None
    # Defined term this entry came from; equals ``name`` for the primary entry
    definition: str = ""

    def __post_init__(self):
        if not self.definition:
            self.definition = self.name

    @classmethod
    def create(
        cls,
        name: str,
        aka: Optional[Iterable[str]] = None,
        description: Optional[str] = None,
        definition: Optional[str] = None,
    ) -> "Term":
        return cls(
            name=name,
            lookup_key=name.lower(),
            aka=[a for a in (aka or []) if a != name],
            description=description,
            definition=definition or name,
        )

    @property
    def is_alias(self) -> bool:
        return self.name != self.definition


@dataclass
class Namespace:
    name: str
    terms: List[Term] = field(default_factory=list)
    known_terms: Set[str] = field(default_factory=set)
    is_global: bool = False


class GlossaryStore:
    """In-memory collection of namespaces with their terms and known terms."""

    def __init__(self):
        self.namespaces: List[Namespace] = [
            Namespace(name=GLOBAL_NAMESPACE, is_global=True)
        ]
        self._populated = False
        # Guards namespace creation and known_terms
        self._lock = threading.RLock()

    @classmethod
    def from_definitions(
        cls,
        definitions: Mapping[str, Mapping[str, object]],
        known_lists: Optional[Mapping[str, Iterable[str]]] = None,
    ) -> "GlossaryStore":
        """Build a store from parsed definitions and known-term lists.

        Args:
            definitions: namespace -> term name -> TermDefinition (or a raw
                mapping with ``aka``/``description`` keys)
            known_lists: namespace -> term names to suppress
        """
        store = cls()
        store.add_definitions(definitions)
        if known_lists:
            store.add_known(known_lists)
        return store

    def add_definitions(self, definitions: Mapping[str, Mapping[str, object]]) -> None:
        """Layer definitions on top of the current content. Terms accumulate."""
        for ns_name, ns_terms in definitions.items():
            for term_name, value in ns_terms.items():
                definition = TermDefinition.from_value(value)
                self.define(ns_name, str(term_name), definition.aka, definition.description)

    def add_known(self, known_lists: Mapping[str, Iterable[str]]) -> None:
        for ns_name, term_names in known_lists.items():
            for term_name in term_names:
                self.mark_known(ns_name, term_name)

    def define(
        self,
        ns_name: str,
        term_name: str,
        aka: Optional[List[str]] = None,
        description: Optional[str] = None,
    ) -> None:
        """Register a term and one extra entry per alias."""
        aka = [a for a in (aka or []) if a != term_name]
        self.set(ns_name, Term.create(term_name, aka, description))
        for alias in aka:
            other_akas = [x for x in aka if x != alias]
            self.set(
                ns_name,
                Term.create(
                    alias, [term_name, *other_akas], description, definition=term_name
                ),
            )

    def set(self, ns_name: str, term: Term) -> None:
        ns = self.get_or_create_namespace(ns_name)
        ns.terms.append(term)
        self._populated = True

    def mark_known(self, ns_name: str, term_name: str) -> bool:
        """Suppress ``term_name`` in ``ns_name``.

        Returns:
            True if the term was newly added to the known set
        """
        with self._lock:
            ns = self.get_or_create_namespace(ns_name)
            self._populated = True
            if term_name in ns.known_terms:
                return False
            ns.known_terms.add(term_name)
        logger.debug(f"Marked '{term_name}' as known in namespace '{ns_name}'")
        return True

    def is_known(self, ns: Namespace, term_name: str) -> bool:
        with self._lock:
            return term_name in ns.known_terms

    def is_empty(self) -> bool:
        return not self._populated

    def global_namespace(self) -> Namespace:
        return next(ns for ns in self.namespaces if ns.is_global)

    def declared_namespaces(self) -> List[Namespace]:
        return [ns for ns in self.namespaces if not ns.is_global]

    def get_namespace(self, ns_name: str) -> Optional[Namespace]:
        for ns in self.namespaces:
            if ns.name == ns_name:
                return ns
        return None

    def get_or_create_namespace(self, ns_name: str) -> Namespace:
        with self._lock:
            ns = self.get_namespace(ns_name)
            if ns is None:
                ns = Namespace(name=ns_name)
                self.namespaces.append(ns)
            return ns

    def known_lists(self) -> Dict[str, List[str]]:
        """Known terms per namespace, sorted, for display and persistence."""
        with self._lock:
            return {
                ns.name: sorted(ns.known_terms)
                for ns in self.namespaces
                if ns.known_terms
            }
