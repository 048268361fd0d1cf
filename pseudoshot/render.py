"""
Hand-off to rendering: each artifact is a label plus the lines to draw.
Artifacts are written as Word documents (one per label, monospaced lines)
with a JSON index per source file.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import asdict, dataclass

from docx import Document
from docx.shared import Pt

PSEUDOCODE_FOLDER = "pseudocode"
CLASS_FOLDER = "class_screenshots"
SNIPPET_FONT = "Courier New"
SNIPPET_FONT_SIZE = Pt(10)

_UNSAFE_NAME_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
# Code points python-docx refuses to put in the document XML.
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b-\x1f\ufffe\uffff]")


@dataclass
class Artifact:
    label: str
    lines: list[str]


def class_artifact(path: str, lines: list[str]) -> Artifact:
    """Whole-class snapshot: raw lines preceded by the file name."""
    name = os.path.basename(path)
    return Artifact(label=name, lines=[name] + list(lines))


def artifact_file_name(label: str) -> str:
    return _UNSAFE_NAME_RE.sub("_", label).strip() or "unnamed"


def generate_word_document(artifact: Artifact, doc_path: str) -> str:
    doc = Document()
    doc.add_heading(artifact.label, level=1)
    for line in artifact.lines:
        paragraph = doc.add_paragraph()
        paragraph.paragraph_format.space_after = Pt(0)
        run = paragraph.add_run(_CONTROL_CHARS_RE.sub("", line))
        run.font.name = SNIPPET_FONT
        run.font.size = SNIPPET_FONT_SIZE

    os.makedirs(os.path.dirname(doc_path) or ".", exist_ok=True)
    doc.save(doc_path)
    return doc_path


def write_artifacts(artifacts: list[Artifact], out_dir: str, folder: str) -> list[str]:
    target = os.path.join(out_dir, folder)
    os.makedirs(target, exist_ok=True)
    written = []
    used: set[str] = set()
    for artifact in artifacts:
        name = artifact_file_name(artifact.label)
        base, n = name, 1
        # overloads share a label
        while name in used:
            name = f"{base}_{n}"
            n += 1
        used.add(name)
        doc_path = os.path.join(target, f"{name}.docx")
        written.append(generate_word_document(artifact, doc_path))
    return written


def write_index(
    artifacts: list[Artifact], out_dir: str, folder: str, source_path: str, index_name: str = ""
) -> str:
    """JSON index of one source file's artifacts; `index_name` keeps same-named files apart."""
    base = index_name or os.path.splitext(os.path.basename(source_path))[0]
    json_path = os.path.join(out_dir, folder, f"{base}.json")
    os.makedirs(os.path.dirname(json_path), exist_ok=True)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(
            {"source": source_path, "artifacts": [asdict(a) for a in artifacts]},
            f,
            indent=2,
            ensure_ascii=False,
        )
    return json_path
