"""Shared fixtures for glossary tests."""

import pytest

from jargon.glossary.store import GlossaryStore
from jargon.rules.config import Config


DEFINITIONS_YAML = """\
global:
  API:
    description: Application Programming Interface.
billing:
  invoice:
    aka: bill
    description: A request for payment.
  ledger:
    aka: [book, journal]
auth:
  token:
    description: A credential proving identity.
"""

KNOWN_YAML = """\
auth:
  - token
"""


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def store():
    """Store with a billing namespace, an auth namespace and a global term."""
    return GlossaryStore.from_definitions(
        {
            "global": {"API": {"description": "Application Programming Interface."}},
            "billing": {
                "invoice": {"aka": "bill", "description": "A request for payment."},
                "ledger": {"aka": ["book", "journal"]},
            },
            "auth": {"token": {"description": "A credential proving identity."}},
        }
    )


@pytest.fixture
def workspace(tmp_path):
    """A workspace root holding both glossary documents."""
    (tmp_path / ".jargon.yml").write_text(DEFINITIONS_YAML, encoding="utf-8")
    (tmp_path / ".jargon.known.yml").write_text(KNOWN_YAML, encoding="utf-8")
    return tmp_path
