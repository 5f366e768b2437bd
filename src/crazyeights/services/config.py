from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator


class ConfigError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Missing config file: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: e.path)
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ConfigError("\n".join(lines))


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ConfigError(f"Expected int for {key}")
    return v


@dataclass(frozen=True)
class WindowSettings:
    width: int = 1024
    height: int = 768


@dataclass(frozen=True)
class Settings:
    computer_delay_ms: int = 1500
    drawn_card_delay_ms: int = 1000
    window: WindowSettings = field(default_factory=WindowSettings)
    seed: int | None = None
    telemetry_enabled: bool = True

    @property
    def computer_delay(self) -> float:
        return self.computer_delay_ms / 1000.0

    @property
    def drawn_card_delay(self) -> float:
        return self.drawn_card_delay_ms / 1000.0

    def with_overrides(
        self,
        *,
        width: int | None = None,
        height: int | None = None,
        seed: int | None = None,
        delay_ms: int | None = None,
    ) -> "Settings":
        """Apply command-line overrides; None leaves a value as loaded."""
        window = WindowSettings(
            width=width if width is not None else self.window.width,
            height=height if height is not None else self.window.height,
        )
        return replace(
            self,
            window=window,
            seed=seed if seed is not None else self.seed,
            computer_delay_ms=delay_ms if delay_ms is not None else self.computer_delay_ms,
        )


class ConfigService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_settings(self) -> Settings:
        path = self._data_dir / "settings.json"
        schema = _load_json(self._schema_dir / "settings.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ConfigError("settings.json must be an object")

        raw_window = raw.get("window")
        if not isinstance(raw_window, dict):
            raise ConfigError("settings.json.window must be an object")
        window = WindowSettings(
            width=_require_int(raw_window, "width"),
            height=_require_int(raw_window, "height"),
        )

        seed = raw.get("seed")
        if seed is not None and not isinstance(seed, int):
            raise ConfigError("Expected int or null for seed")

        return Settings(
            computer_delay_ms=_require_int(raw, "computer_delay_ms"),
            drawn_card_delay_ms=_require_int(raw, "drawn_card_delay_ms"),
            window=window,
            seed=seed,
            telemetry_enabled=bool(raw.get("telemetry_enabled", True)),
        )

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_settings()
