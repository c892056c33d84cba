from __future__ import annotations

from unittest.mock import MagicMock

import auto_paste
from auto_paste import ClipboardPasteService


def test_paste_returns_failure_when_dependencies_missing(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(auto_paste, "pyperclip", None)
    monkeypatch.setattr(auto_paste, "Controller", None)
    monkeypatch.setattr(auto_paste, "Key", None)

    service = ClipboardPasteService()
    result = service.replace_selection("hello")

    assert result.success is False
    assert result.clipboard_restored is False


def test_paste_returns_failure_on_empty_text() -> None:
    service = ClipboardPasteService()
    result = service.replace_selection("   ")

    assert result.success is False
    assert result.clipboard_restored is True


def test_paste_sends_shortcut_and_restores_clipboard(monkeypatch) -> None:  # noqa: ANN001
    clip = MagicMock()
    clip.paste.return_value = "previous"
    keyboard = MagicMock()
    key = MagicMock()
    monkeypatch.setattr(auto_paste, "pyperclip", clip)
    monkeypatch.setattr(auto_paste, "Controller", lambda: keyboard)
    monkeypatch.setattr(auto_paste, "Key", key)
    monkeypatch.setattr(auto_paste.sys, "platform", "linux")

    result = ClipboardPasteService(restore_delay_s=0).replace_selection("Test phrase.")

    assert result.success is True
    assert [c.args[0] for c in clip.copy.call_args_list] == ["Test phrase.", "previous"]
    keyboard.press.assert_any_call(key.ctrl)
    keyboard.press.assert_any_call("v")


def test_paste_failure_restores_clipboard(monkeypatch) -> None:  # noqa: ANN001
    clip = MagicMock()
    clip.paste.return_value = "previous"
    keyboard = MagicMock()
    keyboard.press.side_effect = RuntimeError("no display")
    monkeypatch.setattr(auto_paste, "pyperclip", clip)
    monkeypatch.setattr(auto_paste, "Controller", lambda: keyboard)
    monkeypatch.setattr(auto_paste, "Key", MagicMock())

    result = ClipboardPasteService(restore_delay_s=0).replace_selection("text")

    assert result.success is False
    assert result.reason.startswith("NO_ACTIVE_TARGET")
    assert result.clipboard_restored is True
    assert clip.copy.call_args_list[-1].args[0] == "previous"
