"""Persistence of terms the user marked as known."""

import logging
import yaml
from pathlib import Path
from typing import Optional

from jargon.rules.config import Config, load_config
from jargon.rules.glossary import Source, load_known_file, source_to_path

logger = logging.getLogger(__name__)


def record_known_term(
    root: Source, namespace: str, term: str, config: Optional[Config] = None
) -> Path:
    """Add ``term`` to ``namespace`` in the root's known-terms document.

    The file is created when missing. Namespaces and their entries keep their
    order and the term is only appended if it is not already listed. The
    document is written back in normalized form: an empty namespace becomes
    an empty list and non-string entries are converted or dropped, as when
    the file is loaded.

    Returns:
        Path of the written document
    """
    config = config or load_config()
    known_path = source_to_path(root) / config.files.known

    ns_to_known = load_known_file(known_path) or {}
    names = ns_to_known.setdefault(namespace, [])
    if term in names:
        logger.debug(f"'{term}' already known in '{namespace}', leaving {known_path}")
        return known_path
    names.append(term)

    known_path.parent.mkdir(parents=True, exist_ok=True)
    with open(known_path, "w", encoding="utf-8") as f:
        yaml.dump(
            ns_to_known,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )

    logger.info(f"Recorded '{term}' as known in '{namespace}' ({known_path})")
    return known_path
