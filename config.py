"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from models import DEFAULT_LANGUAGE_CODE, DictationConfig

logger = logging.getLogger(__name__)

DEFAULT_HOTKEY = "Key.f8"


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "voice_refine" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def load_config(self) -> DictationConfig:
        """Snapshot the credentials and locale for one recording run."""
        return DictationConfig(
            speech_api_key=self.get_speech_api_key() or os.getenv("GOOGLE_API_KEY", ""),
            llm_api_key=self.get_llm_api_key() or os.getenv("DASHSCOPE_API_KEY", ""),
            language_code=self.get_language_code(),
        )

    def get_speech_api_key(self) -> str:
        return str(self._get("speech_api_key", ""))

    def set_speech_api_key(self, key: str) -> None:
        self._set("speech_api_key", key)

    def get_llm_api_key(self) -> str:
        return str(self._get("llm_api_key", ""))

    def set_llm_api_key(self, key: str) -> None:
        self._set("llm_api_key", key)

    def get_language_code(self) -> str:
        return str(self._get("language_code", "") or DEFAULT_LANGUAGE_CODE)

    def set_language_code(self, code: str) -> None:
        self._set("language_code", code.strip())

    def get_hotkey(self) -> str:
        return str(self._get("hotkey", DEFAULT_HOTKEY))

    def set_hotkey(self, hotkey: str) -> None:
        self._set("hotkey", hotkey)

    def _get(self, key: str, default: Any) -> Any:
        return self._read_all().get(key, default)

    def _set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
