# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import json

from pathlib import Path
from typing import Any


def save_json(path: str | Path, data: Any) -> None:
    """
    Write a wire mapping to a JSON file, creating parent directories if needed.

    Keys keep the mapping's insertion order, which for wire objects is the
    order their fields are emitted in.

    Args:
        path: Destination file path (string or `Path`).
        data: A JSON-serializable mapping.

    Raises:
        TypeError: If `data` contains non-JSON-serializable objects.
        OSError: If the file cannot be created or written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def load_json(path: str | Path) -> Any:
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)
