"""System clipboard access."""

from __future__ import annotations

import pyperclip

from .errors import ClipboardError


class SystemClipboard:
    def write_all(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(f"failed to copy to clipboard: {exc}") from exc
