"""
Centralized configuration for the converter: class-name deny-list, skipped
files, example classification and default roots.
"""

from __future__ import annotations

import fnmatch
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple

from .naming import ClassNamePredicate, make_class_name_predicate

logger = logging.getLogger("protoclass.config")

DEFAULT_DENY_NAMES: FrozenSet[str] = frozenset(
    {
        # Built-in namespaces and constructors that are never rewritten.
        "Array",
        "Atomics",
        "Boolean",
        "Date",
        "Error",
        "Function",
        "Intl",
        "JSON",
        "Math",
        "Number",
        "Object",
        "Promise",
        "Proxy",
        "Reflect",
        "RegExp",
        "String",
        "Symbol",
        "WebAssembly",
        # Utility namespaces written with a capital letter.
        "AnimationUtils",
        "Cache",
        "DataUtils",
        "ImageUtils",
        "Interpolations",
        "MathUtils",
        "ShaderChunk",
        "ShaderLib",
        "ShapeUtils",
        "UniformsLib",
        "UniformsUtils",
    }
)

DEFAULT_SKIP_FILES: FrozenSet[str] = frozenset(
    {
        "math/Vector3.js",
        "math/Quaternion.js",
        "math/Box3.js",
    }
)

DEFAULT_EXAMPLE_PATTERNS: Tuple[str, ...] = ("examples/*", "*/examples/*")


@dataclass
class ConverterConfig:
    deny_names: FrozenSet[str] = DEFAULT_DENY_NAMES
    skip_files: FrozenSet[str] = DEFAULT_SKIP_FILES
    example_patterns: Tuple[str, ...] = DEFAULT_EXAMPLE_PATTERNS
    source_root: Optional[Path] = None
    dest_root: Optional[Path] = None
    overrides_root: Optional[Path] = None

    def class_name_predicate(self) -> ClassNamePredicate:
        return make_class_name_predicate(self.deny_names)

    def is_example(self, relative_path: str) -> bool:
        return any(fnmatch.fnmatchcase(relative_path, pattern) for pattern in self.example_patterns)

    def is_skipped(self, relative_path: str) -> bool:
        return relative_path in self.skip_files


def _split(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _as_list(value: object) -> list[str]:
    if isinstance(value, str):
        return _split(value)
    if isinstance(value, Iterable):
        return [str(item) for item in value]
    return []


def _optional_path(raw: Optional[str]) -> Optional[Path]:
    return Path(raw) if raw else None


def load_config(env: Optional[dict] = None) -> ConverterConfig:
    environ = os.environ if env is None else env
    deny_names = set(DEFAULT_DENY_NAMES)
    skip_files = set(DEFAULT_SKIP_FILES)
    example_patterns = list(DEFAULT_EXAMPLE_PATTERNS)

    # Support a JSON blob of settings if offered (optional).
    raw_blob = environ.get("PROTOCLASS_CONFIG_JSON")
    if raw_blob:
        try:
            blob = json.loads(raw_blob)
        except ValueError:
            logger.warning("Ignoring malformed PROTOCLASS_CONFIG_JSON")
            blob = {}
        if not isinstance(blob, dict):
            logger.warning("Ignoring PROTOCLASS_CONFIG_JSON: expected an object")
            blob = {}
        if "deny_names" in blob:
            deny_names = set(_as_list(blob.pop("deny_names")))
        if "skip_files" in blob:
            skip_files = set(_as_list(blob.pop("skip_files")))
        if "example_patterns" in blob:
            example_patterns = _as_list(blob.pop("example_patterns"))

    deny_names.update(_split(environ.get("PROTOCLASS_DENY_NAMES")))
    skip_files.update(_split(environ.get("PROTOCLASS_SKIP_FILES")))
    for pattern in _split(environ.get("PROTOCLASS_EXAMPLE_PATTERNS")):
        if pattern not in example_patterns:
            example_patterns.append(pattern)

    return ConverterConfig(
        deny_names=frozenset(deny_names),
        skip_files=frozenset(skip_files),
        example_patterns=tuple(example_patterns),
        source_root=_optional_path(environ.get("PROTOCLASS_SRC")),
        dest_root=_optional_path(environ.get("PROTOCLASS_DEST")),
        overrides_root=_optional_path(environ.get("PROTOCLASS_OVERRIDES")),
    )
