import yaml
import pytest
from unittest.mock import patch

from jargon.glossary.resolver import resolve
from jargon.glossary.store import EmptyGlossaryError
from jargon.rules.config import Config, load_config, deep_merge
from jargon.rules.glossary import (
    GlossaryFormatError,
    compile_glossary,
    load_definitions_file,
    load_glossary,
    source_to_path,
)
from jargon.rules.known import record_known_term

# --- Config Tests ---


def test_load_defaults_config():
    """Test that default configuration is loaded correctly."""
    with patch("jargon.rules.config.load_user_config", return_value={}):
        config = load_config()
    assert isinstance(config, Config)
    assert config.files.definitions == ".jargon.yml"
    assert config.files.known == ".jargon.known.yml"
    assert config.scan.severity == "info"
    assert config.scan.pattern == "[a-zA-Z][a-zA-Z-_]+"


def test_config_merge():
    """Test that user configuration overrides defaults."""
    user_config_yaml = """
    scan:
      severity: "warning"
    """

    with patch("jargon.rules.config.load_user_config") as mock_user_load:
        mock_user_load.return_value = yaml.safe_load(user_config_yaml)

        config = load_config()

        assert config.scan.severity == "warning"
        assert config.scan.source == "jargon"
        assert config.files.definitions == ".jargon.yml"


def test_config_rejects_bad_severity():
    with pytest.raises(ValueError):
        Config(scan={"severity": "loud"})


def test_config_rejects_bad_pattern():
    with pytest.raises(ValueError):
        Config(scan={"pattern": "[unclosed"})


def test_deep_merge_keeps_siblings():
    merged = deep_merge({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
    assert merged == {"a": {"x": 1, "y": 3}}


# --- Glossary loading ---


def test_compile_from_workspace(workspace, config):
    store = compile_glossary([workspace], config)
    assert not store.is_empty()
    assert [ns.name for ns in store.namespaces] == ["global", "billing", "auth"]
    assert store.get_namespace("auth").known_terms == {"token"}
    assert resolve(store, "token", "/x/auth/y.md") is None
    term, _ = resolve(store, "journals", "/x/billing/y.md")
    assert term.aka == ["ledger", "book"]


def test_compile_from_no_sources(config):
    assert compile_glossary([], config).is_empty()


def test_compile_from_directory_without_documents(tmp_path, config):
    assert compile_glossary([tmp_path], config).is_empty()


def test_load_glossary_raises_when_empty(tmp_path, config):
    with pytest.raises(EmptyGlossaryError) as exc_info:
        load_glossary([tmp_path], config)
    assert str(tmp_path) in str(exc_info.value)


def test_known_file_alone_is_enough(tmp_path, config):
    (tmp_path / ".jargon.known.yml").write_text("billing: [invoice]\n", encoding="utf-8")
    store = load_glossary([tmp_path], config)
    assert store.get_namespace("billing").known_terms == {"invoice"}


def test_sources_layer_additively(tmp_path, config):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / ".jargon.yml").write_text(
        "billing:\n  invoice:\n    description: first\n", encoding="utf-8"
    )
    (second / ".jargon.yml").write_text(
        "billing:\n  invoice:\n    description: second\n  refund: {}\n",
        encoding="utf-8",
    )
    (second / ".jargon.known.yml").write_text("billing:\n  - refund\n", encoding="utf-8")

    store = compile_glossary([first, second], config)
    billing = store.get_namespace("billing")
    assert [t.name for t in billing.terms] == ["invoice", "invoice", "refund"]
    assert resolve(store, "invoice", "/billing/a.md")[0].description == "first"
    assert resolve(store, "refund", "/billing/a.md") is None


def test_empty_yaml_document(tmp_path):
    path = tmp_path / ".jargon.yml"
    path.write_text("", encoding="utf-8")
    assert load_definitions_file(path) == {}


def test_missing_document(tmp_path):
    assert load_definitions_file(tmp_path / ".jargon.yml") is None


def test_non_mapping_document_rejected(tmp_path):
    path = tmp_path / ".jargon.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(GlossaryFormatError) as exc_info:
        load_definitions_file(path)
    assert str(path) in str(exc_info.value)


def test_invalid_yaml_rejected(tmp_path):
    path = tmp_path / ".jargon.yml"
    path.write_text("billing: [unclosed\n", encoding="utf-8")
    with pytest.raises(GlossaryFormatError):
        load_definitions_file(path)


def test_custom_file_names(tmp_path):
    (tmp_path / "terms.yml").write_text("ns:\n  alpha: {}\n", encoding="utf-8")
    config = Config(files={"definitions": "terms.yml", "known": "known.yml"})
    store = compile_glossary([tmp_path], config)
    assert [t.name for t in store.get_namespace("ns").terms] == ["alpha"]


def test_source_to_path_accepts_file_uri(tmp_path):
    assert source_to_path(tmp_path.as_uri()) == tmp_path
    assert source_to_path(str(tmp_path)) == tmp_path
    assert source_to_path(tmp_path) == tmp_path


# --- Known-term persistence ---


def test_record_known_term_appends(workspace, config):
    path = record_known_term(workspace, "billing", "invoice", config)
    assert path == workspace / ".jargon.known.yml"
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data == {"auth": ["token"], "billing": ["invoice"]}


def test_record_known_term_no_duplicates(workspace, config):
    record_known_term(workspace, "auth", "token", config)
    data = yaml.safe_load((workspace / ".jargon.known.yml").read_text(encoding="utf-8"))
    assert data["auth"] == ["token"]


def test_record_known_term_creates_file(tmp_path, config):
    path = record_known_term(tmp_path.as_uri(), "billing", "ledger", config)
    assert path == tmp_path / ".jargon.known.yml"
    assert yaml.safe_load(path.read_text(encoding="utf-8")) == {"billing": ["ledger"]}


def test_recorded_term_suppressed_after_reload(workspace, config):
    record_known_term(workspace, "billing", "invoice", config)
    store = compile_glossary([workspace], config)
    assert resolve(store, "invoice", "/billing/readme.md") is None
    assert resolve(store, "bill", "/billing/readme.md") is not None


def test_record_known_term_keeps_namespace_order(tmp_path, config):
    (tmp_path / ".jargon.known.yml").write_text(
        "zeta:\n  - b\n  - a\nalpha:\n", encoding="utf-8"
    )
    path = record_known_term(tmp_path, "middle", "m", config)
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert list(data) == ["zeta", "alpha", "middle"]
    assert data["zeta"] == ["b", "a"]
    # Empty namespaces are normalized to empty lists
    assert data["alpha"] == []
