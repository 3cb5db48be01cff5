"""Loading of glossary definition and known-term documents."""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

from jargon.glossary.definitions import TermDefinition, parse_definitions, parse_known
from jargon.glossary.store import EmptyGlossaryError, GlossaryStore, JargonError
from jargon.rules.config import Config, load_config

logger = logging.getLogger(__name__)

Source = Union[str, Path]


class GlossaryFormatError(JargonError):
    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Invalid glossary file {path}: {reason}")


def source_to_path(source: Source) -> Path:
    """Turn a workspace root (plain path or file:// URI) into a Path."""
    if isinstance(source, Path):
        return source
    if source.startswith("file:"):
        parsed = urlparse(source)
        return Path(url2pathname(parsed.path))
    return Path(source)


def _read_mapping(path: Path) -> Optional[Dict[str, Any]]:
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise GlossaryFormatError(path, f"not valid YAML ({e})") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise GlossaryFormatError(
            path, f"expected a mapping of namespaces, got {type(data).__name__}"
        )
    return data


def load_definitions_file(path: Path) -> Optional[Dict[str, Dict[str, TermDefinition]]]:
    """Load a definitions document, or None when the file does not exist."""
    data = _read_mapping(path)
    if data is None:
        return None
    return parse_definitions(data)


def load_known_file(path: Path) -> Optional[Dict[str, List[str]]]:
    """Load a known-terms document, or None when the file does not exist."""
    data = _read_mapping(path)
    if data is None:
        return None
    return parse_known(data)


def compile_glossary(
    sources: Iterable[Source], config: Optional[Config] = None
) -> GlossaryStore:
    """Build a fresh store from the glossary documents found in each source.

    Sources are read in order; definitions for the same namespace accumulate.
    """
    config = config or load_config()
    store = GlossaryStore()
    for source in sources:
        root = source_to_path(source)

        definitions = load_definitions_file(root / config.files.definitions)
        if definitions is not None:
            store.add_definitions(definitions)
            logger.info(
                f"Loaded {sum(len(t) for t in definitions.values())} terms "
                f"in {len(definitions)} namespaces from {root / config.files.definitions}"
            )

        known = load_known_file(root / config.files.known)
        if known is not None:
            store.add_known(known)
            logger.info(
                f"Loaded {sum(len(t) for t in known.values())} known terms "
                f"from {root / config.files.known}"
            )
    return store


def ensure_not_empty(store: GlossaryStore, sources: Iterable[Source]) -> GlossaryStore:
    if store.is_empty():
        raise EmptyGlossaryError([str(s) for s in sources])
    return store


def load_glossary(
    sources: Iterable[Source], config: Optional[Config] = None
) -> GlossaryStore:
    """Compile the glossary and fail when no glossary documents were found."""
    sources = list(sources)
    return ensure_not_empty(compile_glossary(sources, config), sources)
