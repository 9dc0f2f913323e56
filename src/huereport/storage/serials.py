from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from huereport.models import SerialMapping


class SerialStore:
    """The serial-number mapping file: a JSON object keyed by light unique id."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> SerialMapping:
        if not self._path.exists():
            return SerialMapping()

        try:
            with self._path.open("r") as handle:
                data = json.load(handle) or {}
        except json.JSONDecodeError as exc:
            raise ValueError(
                f"Invalid JSON in serials file: {self._path}\n{exc}"
            ) from exc

        try:
            return SerialMapping.model_validate({"lights": data})
        except ValidationError as exc:
            raise ValueError(f"Invalid serials file: {self._path}\n{exc}") from exc

    def save(self, mapping: SerialMapping) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            unique_id: entry.model_dump(by_alias=True)
            for unique_id, entry in mapping.lights.items()
        }
        with self._path.open("w") as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)
            handle.write("\n")


def read_inventory(path: Path | None) -> str | None:
    if path is None or not path.exists():
        return None
    return path.read_text()
