"""
Argosy messengers: the single sink for user-facing text.

- Messenger: abstract base with one operation, write(line).
- ConsoleMessenger: writes through a rich Console (stdout by default).
- BufferMessenger: keeps the lines in memory (embedding, tests).

Styling
- ConsoleMessenger prints text verbatim (no markup, no highlighting). With colorful=True,
  usage and error lines pick their style from a small palette; define a mapping named
  __styles__ in __main__ to override any palette entry:
    • usage-label     "usage:" prefix
    • program-name    the line right after "usage:"
    • error-message   lines starting with "Error:" and contract error messages
"""
from abc import ABC, abstractmethod
from collections import defaultdict

from rich.console import Console
from rich.text import Text


class Messenger(ABC):
    @abstractmethod
    def write(self, line, /):
        raise NotImplementedError

    def error(self, line, /):
        """
        write a diagnostic line; plain messengers do not tell it apart from other output.
        """
        self.write(line)


class ConsoleMessenger(Messenger):
    """
    Messenger writing through rich.

    Parameters
    - console: Console | None
      Target console; a stdout console is created when omitted.
    - colorful: bool
      Style usage and error lines with the palette (off by default).
    """

    def __init__(self, console=None, /, *, colorful=False):
        self._console = console if console is not None else Console(highlight=False)
        self._colorful = bool(colorful)

    @property
    def console(self):
        return self._console

    @property
    def colorful(self):
        return self._colorful

    def _styles(self):
        return defaultdict(str, {
            "usage-label": "bold #00E6FF",  # CYAN
            "program-name": "bold #FF4D94",  # MAGENTA-PINK
            "error-message": "bold #EF4444",  # RED
        } | getattr(__import__("__main__"), "__styles__", {}))

    def _render(self, line, style=""):
        if not self._colorful:
            return Text(line)
        styles = self._styles()
        if style:
            return Text(line, styles[style])
        if line.startswith("usage: "):
            head, _, tail = line[len("usage: "):].partition(" ")
            return Text.assemble(
                ("usage: ", styles["usage-label"]),
                (head, styles["program-name"]),
                " " if tail else "",
                tail,
            )
        if line.startswith("Error:"):
            return Text(line, styles["error-message"])
        return Text(line)

    def write(self, line, /):
        self._console.print(self._render(line), markup=False, highlight=False, soft_wrap=True)

    def error(self, line, /):
        self._console.print(self._render(line, "error-message"), markup=False, highlight=False, soft_wrap=True)


class BufferMessenger(Messenger):
    """
    Messenger collecting the written lines.

    >>> messenger = BufferMessenger()
    >>> messenger.write("usage: prog")
    >>> messenger.text
    'usage: prog'
    """

    def __init__(self):
        self._lines = []

    @property
    def lines(self):
        return tuple(self._lines)

    @property
    def text(self):
        return "\n".join(self._lines)

    def write(self, line, /):
        self._lines.append(str(line))

    def clear(self):
        self._lines.clear()


__all__ = (
    "Messenger",
    "ConsoleMessenger",
    "BufferMessenger",
)
