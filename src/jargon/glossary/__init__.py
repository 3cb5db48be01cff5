from .definitions import TermDefinition
from .store import (
    GLOBAL_NAMESPACE,
    EmptyGlossaryError,
    GlossaryStore,
    JargonError,
    Namespace,
    Term,
)
from .resolver import AmbiguousNamespaceError, LookupOutcome, Resolution, resolve

__all__ = [
    "GLOBAL_NAMESPACE",
    "AmbiguousNamespaceError",
    "EmptyGlossaryError",
    "GlossaryStore",
    "JargonError",
    "LookupOutcome",
    "Namespace",
    "Resolution",
    "Term",
    "TermDefinition",
    "resolve",
]
