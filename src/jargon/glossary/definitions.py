"""Typed shapes of the glossary YAML documents."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class TermDefinition(BaseModel):
    aka: List[str] = Field(default_factory=list)
    description: Optional[str] = None

    @field_validator("aka", mode="before")
    @classmethod
    def normalize_aka(cls, v):
        # A single alias may be written as a plain string
        if isinstance(v, str):
            return [v]
        if isinstance(v, (list, tuple)):
            return [a for a in v if isinstance(a, str)]
        return []

    @field_validator("description", mode="before")
    @classmethod
    def normalize_description(cls, v):
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @classmethod
    def from_value(cls, value: Any) -> "TermDefinition":
        """Build a definition from whatever sits under a term key.

        A mapping is read for ``aka``/``description``, a plain string is taken
        as the description, and anything else (e.g. an empty key) yields an
        empty definition.
        """
        if isinstance(value, TermDefinition):
            return value
        if isinstance(value, dict):
            return cls(aka=value.get("aka"), description=value.get("description"))
        if isinstance(value, str):
            return cls(description=value)
        return cls()


def parse_definitions(data: Dict[str, Any]) -> Dict[str, Dict[str, TermDefinition]]:
    """Parse a definitions document (namespace -> term -> {aka, description})."""
    result: Dict[str, Dict[str, TermDefinition]] = {}
    for ns_name, ns_terms in data.items():
        terms = result.setdefault(str(ns_name), {})
        if not isinstance(ns_terms, dict):
            continue
        for term_name, value in ns_terms.items():
            terms[str(term_name)] = TermDefinition.from_value(value)
    return result


def parse_known(data: Dict[str, Any]) -> Dict[str, List[str]]:
    """Parse a known-terms document (namespace -> list of term names)."""
    result: Dict[str, List[str]] = {}
    for ns_name, names in data.items():
        if isinstance(names, str):
            names = [names]
        elif not isinstance(names, (list, tuple)):
            names = []
        result[str(ns_name)] = [str(n) for n in names if n is not None]
    return result
