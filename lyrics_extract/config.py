from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .aggregator import DEFAULT_SEPARATOR_TEXT
from .selection import DEFAULT_FALLBACK_FRAME_IDS

CONFIG_NAMES = ("lyrics-extract.yaml", "lyrics-extract.yml")


class ScanSettings(BaseModel):
    recursive: bool = False


class OutputSettings(BaseModel):
    path: Path = Path("output.txt")
    include_names: bool = False
    separator: bool = False
    separator_text: str = DEFAULT_SEPARATOR_TEXT

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        return Path(value).expanduser()


class SelectionSettings(BaseModel):
    fallback_frame_ids: List[str] = Field(default_factory=lambda: list(DEFAULT_FALLBACK_FRAME_IDS))

    @field_validator("fallback_frame_ids")
    @classmethod
    def _strip_ids(cls, values: List[str]) -> List[str]:
        cleaned = [value.strip() for value in values]
        if any(not value for value in cleaned):
            raise ValueError("frame identifiers must not be empty")
        return cleaned


class Settings(BaseModel):
    scan: ScanSettings = ScanSettings()
    output: OutputSettings = OutputSettings()
    selection: SelectionSettings = SelectionSettings()
    log_level: str = "info"

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})

    def with_overrides(
        self,
        *,
        recursive: bool = False,
        output: Optional[Path] = None,
        include_names: bool = False,
        separator: bool = False,
        separator_text: Optional[str] = None,
    ) -> "Settings":
        scan = self.scan.model_copy(update={"recursive": self.scan.recursive or recursive})
        out_update: dict[str, object] = {
            "include_names": self.output.include_names or include_names,
            "separator": self.output.separator or separator,
        }
        if output is not None:
            out_update["path"] = Path(output)
        if separator_text is not None:
            out_update["separator_text"] = separator_text
        return self.model_copy(
            update={"scan": scan, "output": self.output.model_copy(update=out_update)}
        )


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for name in CONFIG_NAMES:
        candidate = cwd / name
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path]) -> Settings:
    config_path = find_config(explicit_path)
    if config_path is None:
        return Settings()
    return Settings.load(config_path)
