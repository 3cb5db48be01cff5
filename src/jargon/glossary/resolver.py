"""Resolution of scanned words against the glossary store.

A document draws its terms from the one declared namespace whose name appears
in the document's path, or from the global namespace when none does. Paths
matching several namespaces are a configuration error.
"""

from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from .store import GlossaryStore, JargonError, Namespace, Term


class AmbiguousNamespaceError(JargonError):
    def __init__(self, query: str, path: str, candidates: List[str]):
        self.query = query
        self.path = path
        self.candidates = list(candidates)
        super().__init__(
            f"Ambiguity found for {query} in {path}. "
            "Name your namespaces more concretely. "
            f"Possible namespaces are: {', '.join(self.candidates)}"
        )


class LookupOutcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    SUPPRESSED = "suppressed"


class Resolution(NamedTuple):
    term: Term
    namespace: Namespace


def select_namespace(store: GlossaryStore, query: str, path: str) -> Namespace:
    matching = [ns for ns in store.declared_namespaces() if ns.name in path]
    if len(matching) > 1:
        raise AmbiguousNamespaceError(query, path, [ns.name for ns in matching])
    if not matching:
        return store.global_namespace()
    return matching[0]


def find_term(ns: Namespace, query: str) -> Optional[Term]:
    """First exact (case-insensitive) match, then first trailing-'s' match."""
    query = query.lower()
    for term in ns.terms:
        if term.lookup_key == query:
            return term
    for term in ns.terms:
        if term.lookup_key + "s" == query:
            return term
    return None


def lookup(
    store: GlossaryStore, query: str, path: str
) -> Tuple[LookupOutcome, Optional[Term], Namespace]:
    ns = select_namespace(store, query, path)
    term = find_term(ns, query)
    if term is None:
        return LookupOutcome.NOT_FOUND, None, ns
    if store.is_known(ns, term.name):
        return LookupOutcome.SUPPRESSED, term, ns
    return LookupOutcome.FOUND, term, ns


def resolve(store: GlossaryStore, query: str, path: str) -> Optional[Resolution]:
    """Resolve ``query`` for the document at ``path``.

    Returns:
        The matched term and its namespace, or None when the word is not a
        glossary term or the user marked it as known.

    Raises:
        AmbiguousNamespaceError: ``path`` contains more than one namespace name
    """
    outcome, term, ns = lookup(store, query, path)
    if outcome is LookupOutcome.FOUND:
        return Resolution(term, ns)
    return None
