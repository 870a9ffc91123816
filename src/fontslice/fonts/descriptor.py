"""Declarative font-family descriptors stored next to the font files.

Each font lives in its own directory holding a descriptor (``config.json``,
``config.yaml`` or ``config.yml``) and the font binaries it references::

    {
        "id": "src-han",
        "version": "2.004",
        "font_family": "Source Han Sans",
        "license": "OFL-1.1",
        "fallback": ["noto-sans"],
        "files": [
            {"name": "Regular", "path": "SourceHanSans-Regular.otf",
             "font_family": "Source Han Sans Regular"}
        ]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
import yaml

from fontslice.core.exceptions import DescriptorError


DESCRIPTOR_FILENAMES: tuple[str, ...] = ("config.json", "config.yaml", "config.yml")


class FontFileEntry(BaseModel):
    """One font binary declared by a descriptor."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    path: str
    font_family: str


class FontDescriptor(BaseModel):
    """Identity, licensing and fallback chain of a font family.

    Keys this model does not know about are kept and written back by :meth:`save`.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    version: str
    font_family: str
    license: str
    fallback: tuple[str, ...] = ()
    files: tuple[FontFileEntry, ...] = ()
    name: dict[str, str] | None = None
    title: dict[str, str] | None = None

    @classmethod
    def from_mapping(cls, data: Any) -> FontDescriptor:
        """Validate a decoded descriptor payload."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise DescriptorError(f"Invalid font descriptor: {exc}") from exc

    def to_mapping(self) -> dict[str, Any]:
        """Return a JSON-compatible payload, omitting unset localized texts."""
        payload = self.model_dump(mode="json")
        for key in ("name", "title"):
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload

    @classmethod
    def load(cls, font_dir: Path) -> FontDescriptor:
        """Load the descriptor stored in ``font_dir``."""
        path = find_descriptor(font_dir)
        if path is None:
            raise DescriptorError(f"No descriptor found in {font_dir}")
        return cls.load_file(path)

    @classmethod
    def load_file(cls, path: Path) -> FontDescriptor:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DescriptorError(f"Unable to read {path}") from exc
        try:
            if path.suffix.lower() == ".json":
                payload = json.loads(text)
            else:
                payload = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise DescriptorError(f"Malformed descriptor {path}") from exc
        return cls.from_mapping(payload)

    def save(self, font_dir: Path, *, filename: str = "config.json") -> Path:
        """Write the descriptor into ``font_dir`` and return its path."""
        font_dir.mkdir(parents=True, exist_ok=True)
        path = font_dir / filename
        payload = self.to_mapping()
        if path.suffix.lower() == ".json":
            text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        else:
            text = yaml.safe_dump(payload, allow_unicode=True, sort_keys=False)
        path.write_text(text, encoding="utf-8")
        return path


def find_descriptor(font_dir: Path) -> Path | None:
    """Return the first descriptor file present in ``font_dir``."""
    for filename in DESCRIPTOR_FILENAMES:
        candidate = font_dir / filename
        if candidate.is_file():
            return candidate
    return None


__all__ = ["DESCRIPTOR_FILENAMES", "FontDescriptor", "FontFileEntry", "find_descriptor"]
