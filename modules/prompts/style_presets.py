"""Suggested style tags offered next to the prompt box."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

DEFAULT_TAGS = (
    "studio ghibli style",
    "photorealistic",
    "iphone selfie",
    "cartoon line drawing",
    "naruto style",
    "film photo",
    "90s film",
    "michelangelo painting",
    "watercolor",
    "pixel art",
    "cyberpunk",
    "vaporwave",
    "oil painting",
    "pencil sketch",
    "ukiyo-e",
    "pop art",
    "impressionist",
    "low poly",
    "isometric",
    "retro game",
)


@dataclass(slots=True)
class StylePreset:
    """A clickable tag and the text it appends to the prompt."""

    name: str
    positive: str = ""

    @property
    def text(self) -> str:
        return self.positive or self.name


class StylePresetRegistry:
    """Ordered, in-memory registry of style presets."""

    def __init__(self) -> None:
        self._presets: Dict[str, StylePreset] = {}

    @classmethod
    def with_defaults(cls) -> "StylePresetRegistry":
        registry = cls()
        for tag in DEFAULT_TAGS:
            registry.add(StylePreset(name=tag))
        return registry

    def load_from_file(self, path: Path) -> None:
        """Load presets from a JSON list of ``{"name", "positive"}`` objects."""
        if not path.exists():
            return
        with path.open("r", encoding="utf-8") as fp:
            data = json.load(fp)
        for entry in data:
            self.add(StylePreset(name=entry["name"], positive=entry.get("positive", "")))

    def add(self, preset: StylePreset) -> None:
        """Register a new style preset."""
        self._presets[preset.name] = preset

    def list_presets(self) -> List[StylePreset]:
        """Return all registered presets in insertion order."""
        return list(self._presets.values())

    def get(self, name: str) -> StylePreset:
        """Retrieve a preset by name."""
        try:
            return self._presets[name]
        except KeyError as exc:
            raise KeyError(f"Style preset '{name}' not found") from exc


def append_tag(prompt: str, tag: str) -> str:
    """Append ``tag`` to ``prompt`` separated by exactly one space."""
    if prompt == "" or prompt.endswith(" "):
        return prompt + tag
    return f"{prompt} {tag}"
