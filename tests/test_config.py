import json
import logging
from pathlib import Path

from protoclass.config import ConverterConfig, load_config


def test_defaults_without_environment():
    config = load_config({})
    assert "Math" in config.deny_names
    assert "math/Vector3.js" in config.skip_files
    assert config.source_root is None
    assert config.dest_root is None
    assert config.overrides_root is None


def test_env_lists_extend_defaults():
    config = load_config(
        {
            "PROTOCLASS_DENY_NAMES": "Legacy, Helpers",
            "PROTOCLASS_SKIP_FILES": "core/Old.js",
            "PROTOCLASS_EXAMPLE_PATTERNS": "demos/*",
        }
    )
    assert {"Legacy", "Helpers", "Math"} <= config.deny_names
    assert {"core/Old.js", "math/Box3.js"} <= config.skip_files
    assert config.is_example("demos/app.js")
    assert config.is_example("examples/app.js")


def test_json_blob_replaces_lists():
    blob = {"deny_names": ["Only"], "skip_files": [], "example_patterns": "samples/*"}
    config = load_config({"PROTOCLASS_CONFIG_JSON": json.dumps(blob)})
    assert config.deny_names == frozenset({"Only"})
    assert config.skip_files == frozenset()
    assert config.example_patterns == ("samples/*",)


def test_malformed_json_blob_is_ignored(caplog):
    with caplog.at_level(logging.WARNING, logger="protoclass.config"):
        config = load_config({"PROTOCLASS_CONFIG_JSON": "{not json"})
    assert "Math" in config.deny_names
    assert "PROTOCLASS_CONFIG_JSON" in caplog.text


def test_non_object_json_blob_is_ignored():
    config = load_config({"PROTOCLASS_CONFIG_JSON": "[1, 2]"})
    assert "Math" in config.deny_names


def test_roots_from_environment(monkeypatch):
    monkeypatch.setenv("PROTOCLASS_SRC", "/tmp/src")
    monkeypatch.setenv("PROTOCLASS_DEST", "/tmp/out")
    monkeypatch.setenv("PROTOCLASS_OVERRIDES", "/tmp/overrides")
    config = load_config()
    assert config.source_root == Path("/tmp/src")
    assert config.dest_root == Path("/tmp/out")
    assert config.overrides_root == Path("/tmp/overrides")


def test_example_and_skip_classification():
    config = ConverterConfig()
    assert config.is_example("examples/webgl.js")
    assert config.is_example("docs/examples/webgl.js")
    assert not config.is_example("src/core/Object3D.js")
    assert config.is_skipped("math/Quaternion.js")
    assert not config.is_skipped("math/Vector2.js")


def test_predicate_uses_configured_deny_names():
    is_class_name = ConverterConfig(deny_names=frozenset({"Foo"})).class_name_predicate()
    assert not is_class_name("Foo")
    assert is_class_name("Math")
