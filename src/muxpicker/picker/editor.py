"""Single-line text editing with readline bindings."""

from __future__ import annotations


def is_printable(character: str | None) -> bool:
    return character is not None and len(character) == 1 and character.isprintable()


class LineEditor:
    """Text plus an insertion cursor, edited one key at a time."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.cursor = len(text)

    def clear(self) -> None:
        self.text = ""
        self.cursor = 0

    def insert(self, character: str) -> None:
        self.text = self.text[: self.cursor] + character + self.text[self.cursor :]
        self.cursor += len(character)

    def backspace(self) -> bool:
        if self.cursor == 0:
            return False
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1
        return True

    def delete_forward(self) -> bool:
        if self.cursor >= len(self.text):
            return False
        self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]
        return True

    def delete_word_backward(self) -> None:
        start = self.cursor
        while start > 0 and self.text[start - 1].isspace():
            start -= 1
        while start > 0 and not self.text[start - 1].isspace():
            start -= 1
        self.text = self.text[:start] + self.text[self.cursor :]
        self.cursor = start

    def delete_word_forward(self) -> None:
        end = self.cursor
        while end < len(self.text) and self.text[end].isspace():
            end += 1
        while end < len(self.text) and not self.text[end].isspace():
            end += 1
        self.text = self.text[: self.cursor] + self.text[end:]

    def handle_key(self, key: str, character: str | None = None) -> bool:
        """Apply an editing key. Returns False when the key is not an editing key."""
        if key in ("left", "ctrl+b"):
            self.cursor = max(0, self.cursor - 1)
        elif key in ("right", "ctrl+f"):
            self.cursor = min(len(self.text), self.cursor + 1)
        elif key == "ctrl+a":
            self.cursor = 0
        elif key == "ctrl+e":
            self.cursor = len(self.text)
        elif key in ("backspace", "ctrl+h"):
            self.backspace()
        elif key == "alt+x":
            self.delete_forward()
        elif key in ("ctrl+u", "alt+shift+x"):
            self.clear()
        elif key == "ctrl+k":
            self.text = self.text[: self.cursor]
        elif key == "ctrl+w":
            self.delete_word_backward()
        elif key == "alt+d":
            self.delete_word_forward()
        elif is_printable(character):
            self.insert(character)
        else:
            return False
        return True
