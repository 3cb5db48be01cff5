import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union

from pydantic import BaseModel

from jargon.glossary.handle import GlossaryHandle
from jargon.glossary.resolver import resolve
from jargon.glossary.store import GlossaryStore, Term
from jargon.rules.config import Config, load_config


@dataclass
class Candidate:
    word: str
    start: int
    end: int


class Position(BaseModel):
    # Zero-based, as editors expect
    line: int
    character: int


class Annotation(BaseModel):
    term: str
    namespace: str
    message: str
    start: int
    end: int
    start_position: Position
    end_position: Position
    severity: str = "info"
    source: str = "jargon"
    aka: List[str] = []
    description: Optional[str] = None
    data: Dict[str, str] = {}


class ScanResult(BaseModel):
    path: str
    annotations: List[Annotation]


def iter_candidates(text: str, pattern: str = r"[a-zA-Z][a-zA-Z-_]+") -> Iterator[Candidate]:
    for m in re.finditer(pattern, text):
        yield Candidate(m.group(0), m.start(), m.end())


def position_at(text: str, offset: int) -> Position:
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return Position(line=line, character=offset - line_start)


def format_message(term: Term) -> str:
    parts = []
    if term.aka:
        aka = ", ".join(f"**{a}**" for a in term.aka)
        parts.append(f"Also known as {aka}.")
    if term.description is not None:
        parts.append(term.description)
    return "\n\n".join(parts)


def is_glossary_document(path: str, config: Config) -> bool:
    return path.endswith(config.files.definitions) or path.endswith(config.files.known)


def scan_document(
    text: str,
    path: str,
    glossary: Union[GlossaryStore, GlossaryHandle],
    config: Optional[Config] = None,
) -> ScanResult:
    """Annotate every glossary term occurring in ``text``.

    ``path`` is the document's location (path or URI) and picks the namespace.
    AmbiguousNamespaceError from the resolver is not caught here.
    """
    config = config or load_config()
    if is_glossary_document(path, config):
        return ScanResult(path=path, annotations=[])

    # Take the store once so a concurrent reload cannot split a scan
    store = glossary.store if isinstance(glossary, GlossaryHandle) else glossary

    annotations = []
    for candidate in iter_candidates(text, config.scan.pattern):
        found = resolve(store, candidate.word, path)
        if found is None:
            continue
        term, ns = found
        annotations.append(
            Annotation(
                term=term.name,
                namespace=ns.name,
                message=format_message(term),
                start=candidate.start,
                end=candidate.end,
                start_position=position_at(text, candidate.start),
                end_position=position_at(text, candidate.end),
                severity=config.scan.severity,
                source=config.scan.source,
                aka=list(term.aka),
                description=term.description,
                data={"termName": term.name, "namespaceName": ns.name},
            )
        )
    return ScanResult(path=path, annotations=annotations)
