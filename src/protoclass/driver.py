"""
File-level driver: discover sources, convert each in isolation, write results.
"""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Pattern

from .config import ConverterConfig
from .diagnostics import Diagnostic
from .errors import ProtoclassError
from .migration import ConversionResult, convert_source

logger = logging.getLogger("protoclass.driver")


@dataclass
class FileReport:
    path: str
    ok: bool
    result: Optional[ConversionResult] = None
    error: Optional[str] = None
    diagnostic: Optional[Diagnostic] = None
    written: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.result and self.result.changed)


@dataclass
class TreeReport:
    files: List[FileReport] = field(default_factory=list)
    overrides: List[str] = field(default_factory=list)

    @property
    def converted(self) -> List[FileReport]:
        return [report for report in self.files if report.ok]

    @property
    def failed(self) -> List[FileReport]:
        return [report for report in self.files if not report.ok]


def create_filter(pattern: str) -> Pattern[str]:
    """Anchored regex for an include glob: ``**`` crosses directories, ``*`` does not."""
    parts = re.split(r"(\*\*|\*)", pattern)
    translated = []
    for part in parts:
        if part == "**":
            translated.append(".+")
        elif part == "*":
            translated.append("[^/]+")
        else:
            translated.append(re.escape(part))
    return re.compile("^" + "".join(translated) + "$")


def discover_files(root: Path, config: ConverterConfig, pattern: Optional[str] = None) -> List[str]:
    include = create_filter(pattern) if pattern else None
    files = sorted(path.relative_to(root).as_posix() for path in root.rglob("*.js") if path.is_file())
    return [
        name
        for name in files
        if not config.is_skipped(name) and (include is None or include.match(name))
    ]


def _write_atomic(path: Path, content: str, *, backup: bool) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if backup and path.exists():
        path.with_suffix(path.suffix + ".bak").write_text(path.read_text(encoding="utf-8"), encoding="utf-8")
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(content, encoding="utf-8")
    tmp_path.replace(path)


def convert_file(
    source_path: Path,
    dest_path: Path,
    *,
    relative: Optional[str] = None,
    config: Optional[ConverterConfig] = None,
    write: bool = False,
    backup: bool = True,
) -> FileReport:
    config = config or ConverterConfig()
    name = relative or source_path.name
    try:
        original = source_path.read_text(encoding="utf-8")
        result = convert_source(
            original,
            path=name,
            is_example=config.is_example(name),
            is_class_name=config.class_name_predicate(),
        )
    except ProtoclassError as exc:
        logger.warning("Failed to convert %s: %s", name, exc)
        return FileReport(path=name, ok=False, error=str(exc), diagnostic=exc.to_diagnostic())
    except Exception as exc:  # pragma: no cover - one file never aborts the run
        logger.exception("Unexpected failure converting %s", name)
        return FileReport(path=name, ok=False, error=f"{type(exc).__name__}: {exc}")

    report = FileReport(path=name, ok=True, result=result)
    if write:
        in_place = dest_path.resolve() == source_path.resolve()
        _write_atomic(dest_path, result.source, backup=backup and in_place)
        report.written = True
    return report


def copy_overrides(overrides_root: Path, dest_root: Path, *, write: bool = False) -> List[str]:
    """Copy auxiliary override files verbatim over the converted tree."""
    copied: List[str] = []
    if not overrides_root.is_dir():
        return copied
    for path in sorted(overrides_root.rglob("*.js")):
        relative = path.relative_to(overrides_root).as_posix()
        if write:
            target = dest_root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, target)
        copied.append(relative)
    return copied


def convert_tree(
    source_root: Path,
    dest_root: Path,
    *,
    config: Optional[ConverterConfig] = None,
    pattern: Optional[str] = None,
    overrides_root: Optional[Path] = None,
    write: bool = False,
    backup: bool = True,
) -> TreeReport:
    config = config or ConverterConfig()
    report = TreeReport()
    for relative in discover_files(source_root, config, pattern):
        report.files.append(
            convert_file(
                source_root / relative,
                dest_root / relative,
                relative=relative,
                config=config,
                write=write,
                backup=backup,
            )
        )
    if overrides_root is not None:
        report.overrides = copy_overrides(overrides_root, dest_root, write=write)
    return report
