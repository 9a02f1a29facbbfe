"""JSON settings for physics tuning and overlay text."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.config import PhysicsConfig
from ..core.state import TextElement


SCHEMA_VERSION = 1
SettingsDefinition = dict[str, Any]

_PHYSICS_KEYS = (
    "gravity",
    "velocity_increase_factor",
    "velocity_decay",
    "ball_growth_rate",
)


@dataclass(slots=True)
class Settings:
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    texts: list[TextElement] = field(default_factory=list)


def default_settings() -> SettingsDefinition:
    return settings_to_defn(Settings())


def load_settings(path: str | Path) -> Settings:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return settings_from_defn(data)


def save_settings(path: str | Path, settings: Settings) -> None:
    Path(path).write_text(
        json.dumps(settings_to_defn(settings), indent=2, sort_keys=True),
        encoding="utf-8",
    )


def settings_to_defn(settings: Settings) -> SettingsDefinition:
    return {
        "schema_version": SCHEMA_VERSION,
        "physics": settings.physics.as_dict(),
        "texts": [
            {
                "text": t.text,
                "x": t.x,
                "y": t.y,
                "color": t.color,
                "font": t.font,
                "size": t.size,
                "is_bold": t.is_bold,
            }
            for t in settings.texts
        ],
    }


def settings_from_defn(data: Any) -> Settings:
    if not isinstance(data, dict):
        raise ValueError("settings must be a JSON object")
    version = _require(data, "schema_version", "settings")
    if version != SCHEMA_VERSION:
        raise ValueError(f"unsupported schema_version: {version}")

    physics = PhysicsConfig()
    raw_physics = data.get("physics", {})
    if not isinstance(raw_physics, dict):
        raise ValueError("physics must be an object")
    for key, value in raw_physics.items():
        if key not in _PHYSICS_KEYS:
            raise ValueError(f"unknown field: physics.{key}")
        setattr(physics, key, _number(value, f"physics.{key}"))

    raw_texts = data.get("texts", [])
    if not isinstance(raw_texts, list):
        raise ValueError("texts must be a list")
    texts = [_parse_text(entry, f"texts[{i}]") for i, entry in enumerate(raw_texts)]
    return Settings(physics=physics, texts=texts)


def _parse_text(entry: Any, ctx: str) -> TextElement:
    if not isinstance(entry, dict):
        raise ValueError(f"{ctx} must be an object")
    text = _require(entry, "text", ctx)
    if not isinstance(text, str):
        raise ValueError(f"{ctx}.text must be a string")
    return TextElement(
        text=text,
        x=_number(_require(entry, "x", ctx), f"{ctx}.x"),
        y=_number(_require(entry, "y", ctx), f"{ctx}.y"),
        color=str(entry.get("color", "white")),
        font=str(entry.get("font", "Arial")),
        size=int(_number(entry.get("size", 24), f"{ctx}.size")),
        is_bold=bool(entry.get("is_bold", False)),
    )


def _require(obj: dict[str, Any], key: str, ctx: str) -> Any:
    if key not in obj:
        raise ValueError(f"missing required field: {ctx}.{key}")
    return obj[key]


def _number(value: Any, ctx: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{ctx} must be a number")
    return float(value)
