"""
pseudoshot - Java method pseudocode snapshots (tree-sitter driven)

Modes:
- pseudocode: rewrite method signatures, loops, conditionals and switches into
  line-aligned pseudocode and write one snippet document per method.
- variables: CSV summary of every variable declared in each class.
- classes: raw whole-file snapshot per source file.

Files are processed one at a time; a file that fails anywhere along the way is
reported and skipped, the rest of the batch continues.
"""

from __future__ import annotations

import argparse
import os
import time
from dataclasses import dataclass, field
from typing import Optional

from .java_tree import ParseFailure, is_java_file, parse_java_file
from .lines import read_source_text, split_source_lines
from .render import (
    CLASS_FOLDER,
    PSEUDOCODE_FOLDER,
    Artifact,
    class_artifact,
    write_artifacts,
    write_index,
)
from .slicer import convert_unit
from .summary import ClassSummary, summarize_unit, write_summary_csv

MODES = ("pseudocode", "variables", "classes")
DEFAULT_OUT_DIR = os.path.join(os.getcwd(), "snapshots")
DEFAULT_CSV_NAME = "variables.csv"

VERBOSE = True


def log(msg: str):
    if VERBOSE:
        print(msg, flush=True)


def warn(msg: str):
    print(msg, flush=True)


@dataclass
class BatchResult:
    processed: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    written: list[str] = field(default_factory=list)


def discover_sources(path: str) -> list[str]:
    """A single .java file, or every .java file under a directory (sorted)."""
    if os.path.isfile(path):
        return [path] if is_java_file(path) else []
    found = []
    for root, _, files in os.walk(path):
        for f in files:
            if is_java_file(f):
                found.append(os.path.join(root, f))
    return sorted(found)


def get_module_name(file_path: str, root_dir: str) -> str:
    """Dotted path of a source file relative to the batch root, extension dropped."""
    if not root_dir:
        return os.path.splitext(os.path.basename(file_path))[0]
    rel_path = os.path.relpath(file_path, root_dir)
    return os.path.splitext(rel_path)[0].replace(os.sep, ".")


def method_artifacts(file_path: str) -> list[Artifact]:
    unit = parse_java_file(file_path)
    converted = convert_unit(unit)
    for problem in converted.diagnostics:
        warn(f"[WARN] {file_path}: {problem}")

    artifacts = []
    for span in converted.methods:
        lines = converted.method_lines(span)
        if not lines:
            log(f"[INFO] {span.label}: nothing to render")
            continue
        artifacts.append(Artifact(label=span.label, lines=lines))
    return artifacts


def process_pseudocode_file(file_path: str, out_dir: str, root_dir: str = "") -> list[str]:
    t0 = time.perf_counter()
    log(f"[INFO] Converting file: {file_path}")
    artifacts = method_artifacts(file_path)
    if not artifacts:
        return []
    written = write_artifacts(artifacts, out_dir, PSEUDOCODE_FOLDER)
    written.append(write_index(artifacts, out_dir, PSEUDOCODE_FOLDER, file_path, get_module_name(file_path, root_dir)))
    log(f"[TIME] {file_path}: {len(artifacts)} method(s) in {time.perf_counter() - t0:.3f}s")
    return written


def process_class_file(file_path: str, out_dir: str) -> list[str]:
    log(f"[INFO] Snapshot of file: {file_path}")
    lines = split_source_lines(read_source_text(file_path))
    return write_artifacts([class_artifact(file_path, lines)], out_dir, CLASS_FOLDER)


def run_batch(paths: list[str], handler) -> BatchResult:
    result = BatchResult()
    for file_path in paths:
        try:
            result.written.extend(handler(file_path))
            result.processed.append(file_path)
        except Exception as e:
            verb = "parse" if isinstance(e, ParseFailure) else "process"
            warn(f"[WARN] Failed to {verb} {file_path}: {e}")
            result.failed[file_path] = str(e)
    return result


def create_pseudocode(paths: list[str], out_dir: str, root_dir: str = "") -> BatchResult:
    return run_batch(paths, lambda p: process_pseudocode_file(p, out_dir, root_dir))


def create_class_snapshots(paths: list[str], out_dir: str) -> BatchResult:
    return run_batch(paths, lambda p: process_class_file(p, out_dir))


def create_variable_summary(paths: list[str], csv_path: str) -> BatchResult:
    summaries: list[ClassSummary] = []

    def collect(file_path: str) -> list[str]:
        summaries.extend(summarize_unit(parse_java_file(file_path)))
        return []

    result = run_batch(paths, collect)
    os.makedirs(os.path.dirname(os.path.abspath(csv_path)), exist_ok=True)
    rows = write_summary_csv(summaries, csv_path)
    log(f"[INFO] Wrote {rows} variable(s) from {len(summaries)} class(es) to {csv_path}")
    result.written.append(csv_path)
    return result


def run(path: str, mode: str = "pseudocode", out_dir: str = DEFAULT_OUT_DIR, csv_path: Optional[str] = None) -> BatchResult:
    if mode not in MODES:
        raise ValueError(f"unknown mode {mode!r}, expected one of {', '.join(MODES)}")
    paths = discover_sources(path)
    root_dir = path if os.path.isdir(path) else os.path.dirname(path)
    log(f"[INFO] Found {len(paths)} Java file(s) under {path}")

    if mode == "pseudocode":
        return create_pseudocode(paths, out_dir, root_dir)
    if mode == "classes":
        return create_class_snapshots(paths, out_dir)
    return create_variable_summary(paths, csv_path or os.path.join(out_dir, DEFAULT_CSV_NAME))


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render Java methods as line-aligned pseudocode snapshots")
    parser.add_argument("--path", required=True, help="Java source root directory OR a single .java file")
    parser.add_argument("--mode", choices=MODES, default="pseudocode", help="What to produce (default: pseudocode)")
    parser.add_argument("--out-dir", default=DEFAULT_OUT_DIR, help="Output directory for documents and indexes")
    parser.add_argument("--csv", default=None, help=f"CSV path for --mode variables (default: <out-dir>/{DEFAULT_CSV_NAME})")
    parser.add_argument("--quiet", action="store_true", help="Only print warnings")
    args = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = not args.quiet

    all_t0 = time.perf_counter()
    result = run(args.path, mode=args.mode, out_dir=os.path.abspath(args.out_dir), csv_path=args.csv)
    log(f"[TIME] Total execution time: {time.perf_counter() - all_t0:.3f}s")
    log(f"Done. {len(result.processed)} file(s) processed, {len(result.failed)} failed.")
    return 1 if result.failed and not result.processed else 0


if __name__ == "__main__":
    raise SystemExit(main())
