"""Local file plumbing for feed documents and result files."""

from __future__ import annotations

import json
import os
from typing import Any


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def write_text(path: str, content: str, encoding: str = "utf-8") -> None:
    parent = os.path.dirname(path)
    if parent:
        ensure_dir(parent)
    with open(path, "w", encoding=encoding) as fh:
        fh.write(content)


def read_text(path: str, encoding: str = "utf-8") -> str:
    with open(path, "r", encoding=encoding) as fh:
        return fh.read()


def write_json(path: str, payload: Any) -> None:
    write_text(path, json.dumps(payload, indent=2, ensure_ascii=False))
