"""Persist and load engine setting overrides."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from pyleague.config.settings import EngineSettings


@dataclass
class SettingsProfile:
    overrides: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "SettingsProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(overrides=dict(data.get("overrides", {})))

    def save(self, path: Path) -> None:
        payload = {"overrides": self.overrides}
        path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")

    def apply(self, settings: EngineSettings) -> EngineSettings:
        return settings.with_overrides(self.overrides)
