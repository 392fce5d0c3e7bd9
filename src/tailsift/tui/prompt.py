"""
FilterInput: single-line text input holding the filter text.

Deliberately small: append-only editing at the end of the line, no
cursor movement. Keys it does not understand are ignored.

Handled keys:
- Printable characters: appended (up to char_limit)
- Backspace (DEL or ^H): delete last character
- Ctrl-U: clear the line
- Ctrl-W: delete the last word and the spaces before it
"""

from dataclasses import dataclass

BACKSPACE_KEYS = ("\x7f", "\x08")
CTRL_U = "\x15"
CTRL_W = "\x17"


@dataclass
class FilterInput:
    """
    Editable filter text with a prompt and placeholder.

    Attributes:
        value: Current text
        placeholder: Shown when the value is empty
        prompt: Prefix drawn before the text
        char_limit: Maximum number of characters kept
    """

    value: str = ""
    placeholder: str = "filter for words..."
    prompt: str = "> "
    char_limit: int = 1000

    def handle_key(self, key: str) -> bool:
        """
        Apply a keypress.

        Args:
            key: Key as delivered by KeyboardTask

        Returns:
            True if the value changed
        """
        before = self.value
        if key in BACKSPACE_KEYS:
            self.value = self.value[:-1]
        elif key == CTRL_U:
            self.value = ""
        elif key == CTRL_W:
            self.value = self.value.rstrip(" ")
            cut = self.value.rfind(" ")
            self.value = self.value[: cut + 1]
        elif key.isprintable():
            room = self.char_limit - len(self.value)
            if room > 0:
                self.value += key[:room]
        return self.value != before

    def view(self) -> str:
        """Return the rendered input row."""
        return f"{self.prompt}{self.value or self.placeholder}"
