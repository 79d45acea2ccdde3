"""
Displays
========

Character-grid output and keyboard input for the game.

A Display draws text at (row, column) cells and reads keys. Keys are
reported by name: the character itself for printable keys, the curses
name ("KEY_LEFT", "KEY_RIGHT", ...) for special keys, and None when a
timed read expires.

Backends:
- CursesDisplay: the terminal, via the standard curses module
- PygameDisplay: a window drawing the same grid with a monospace font
- GridDisplay: an in-memory numpy grid fed by a key script (tests, agents)
"""

from __future__ import annotations

import curses
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Iterable, List, Optional, TypeVar

import numpy as np

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

T = TypeVar("T")


class Display(ABC):
    """Character-grid display with keyboard input."""

    @abstractmethod
    def clear(self) -> None:
        """Blank the whole screen."""

    @abstractmethod
    def write(self, row: int, col: int, text: str) -> None:
        """Write text at (row, col). Text falling off the screen is dropped."""

    @abstractmethod
    def refresh(self) -> None:
        """Make pending writes visible."""

    @abstractmethod
    def read_key(self, timeout_ms: Optional[int] = None) -> Optional[str]:
        """
        Wait for a key.

        Args:
            timeout_ms: Maximum wait in milliseconds. Blocks if None.

        Returns:
            Key name, or None if the timeout expired.
        """

    @abstractmethod
    def read_line(self, row: int, col: int, max_length: int) -> str:
        """Read a line of echoed text at (row, col), ended by Enter."""

    def close(self) -> None:
        """Release the display."""


# =============================================================================
# Terminal
# =============================================================================

class CursesDisplay(Display):
    """
    Terminal display on a curses window.

    Build it inside curses.wrapper() (see run_in_terminal), which sets up
    cbreak/noecho mode and restores the terminal afterwards.
    """

    def __init__(self, stdscr):
        self._screen = stdscr
        self._screen.keypad(True)
        self._set_cursor(0)

    @staticmethod
    def _set_cursor(visibility: int) -> None:
        # Some terminals cannot hide the cursor
        try:
            curses.curs_set(visibility)
        except curses.error:
            pass

    def clear(self) -> None:
        self._screen.erase()

    def write(self, row: int, col: int, text: str) -> None:
        if row < 0 or col < 0:
            return
        try:
            self._screen.addstr(row, col, text)
        except curses.error:
            # Writing past the window edge; the visible part is already drawn
            pass

    def refresh(self) -> None:
        self._screen.refresh()

    def read_key(self, timeout_ms: Optional[int] = None) -> Optional[str]:
        self._screen.timeout(-1 if timeout_ms is None else max(0, int(timeout_ms)))
        try:
            return self._screen.getkey()
        except curses.error:
            # No input before the timeout
            return None

    def read_line(self, row: int, col: int, max_length: int) -> str:
        self._screen.timeout(-1)
        curses.echo()
        self._set_cursor(1)
        try:
            raw = self._screen.getstr(max(0, row), max(0, col), max_length)
        finally:
            curses.noecho()
            self._set_cursor(0)
        return raw.decode("utf-8", errors="replace")[:max_length]


def run_in_terminal(main: Callable[[Display], T]) -> T:
    """Run main with a CursesDisplay, restoring the terminal on exit."""
    return curses.wrapper(lambda stdscr: main(CursesDisplay(stdscr)))


# =============================================================================
# Window
# =============================================================================

class PygameDisplay(Display):
    """
    Windowed display drawing the character grid with pygame.

    Closing the window reports the quit key, so every screen that listens
    for quit also handles the window close button.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        font_size: int = 20,
        title: str = "Catch the Fruit",
        quit_key: str = "q"
    ):
        """
        Initialize the window.

        Args:
            rows: Grid rows.
            cols: Grid columns.
            font_size: Monospace font size in points.
            title: Window caption.
            quit_key: Key name reported when the window is closed.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for the windowed display (pip install pygame)")

        pygame.init()
        self._font = pygame.font.SysFont("monospace", font_size)
        self._cell_w, self._cell_h = self._font.size("M")
        self._rows = rows
        self._cols = cols
        self._quit_key = quit_key

        self._bg = (20, 24, 32)
        self._fg = (235, 235, 220)

        self._screen = pygame.display.set_mode((cols * self._cell_w, rows * self._cell_h))
        pygame.display.set_caption(title)

        self._special_keys = {
            pygame.K_LEFT: "KEY_LEFT",
            pygame.K_RIGHT: "KEY_RIGHT",
            pygame.K_UP: "KEY_UP",
            pygame.K_DOWN: "KEY_DOWN",
        }

    def clear(self) -> None:
        self._screen.fill(self._bg)

    def write(self, row: int, col: int, text: str) -> None:
        if not 0 <= row < self._rows or col < 0 or not text:
            return
        text = text[:max(0, self._cols - col)]
        if not text:
            return
        surface = self._font.render(text, True, self._fg, self._bg)
        self._screen.blit(surface, (col * self._cell_w, row * self._cell_h))

    def refresh(self) -> None:
        pygame.display.flip()

    def _next_key_event(self, deadline: Optional[int]):
        """Wait for a KEYDOWN or QUIT event until deadline (pygame ticks), or None."""
        while True:
            if deadline is None:
                event = pygame.event.wait()
            else:
                remaining = deadline - pygame.time.get_ticks()
                if remaining <= 0:
                    return None
                event = pygame.event.wait(remaining)
            if event.type in (pygame.KEYDOWN, pygame.QUIT):
                return event
            if event.type == pygame.NOEVENT:
                return None

    def read_key(self, timeout_ms: Optional[int] = None) -> Optional[str]:
        deadline = None if timeout_ms is None else pygame.time.get_ticks() + timeout_ms
        while True:
            event = self._next_key_event(deadline)
            if event is None:
                return None
            if event.type == pygame.QUIT:
                return self._quit_key
            name = self._special_keys.get(event.key)
            if name is not None:
                return name
            if event.unicode:
                return event.unicode
            # Modifier keys and the like: keep waiting until the deadline

    def read_line(self, row: int, col: int, max_length: int) -> str:
        chars: List[str] = []
        while True:
            self.write(row, col, "".join(chars) + "_" + " " * (max_length - len(chars)))
            self.refresh()
            event = self._next_key_event(None)
            if event.type == pygame.QUIT:
                break
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                break
            if event.key == pygame.K_BACKSPACE:
                if chars:
                    chars.pop()
            elif event.unicode and event.unicode.isprintable() and len(chars) < max_length:
                chars.append(event.unicode)
        self.write(row, col, "".join(chars) + " " * (max_length - len(chars) + 1))
        return "".join(chars)

    def close(self) -> None:
        pygame.quit()


# =============================================================================
# In-memory grid
# =============================================================================

class ScriptExhausted(RuntimeError):
    """A blocking read was made on a GridDisplay with no scripted input left."""


class GridDisplay(Display):
    """
    In-memory display backed by a numpy character grid.

    Keys and typed lines come from scripts. A timed read with no keys left
    behaves like a timeout; a blocking read with no keys left raises
    ScriptExhausted instead of hanging.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        keys: Iterable[Optional[str]] = (),
        lines: Iterable[str] = ()
    ):
        self._rows = rows
        self._cols = cols
        self._grid = np.full((rows, cols), " ", dtype="<U1")
        self._keys: Deque[Optional[str]] = deque(keys)
        self._lines: Deque[str] = deque(lines)

        # Inspection hooks for tests
        self.frames: List[str] = []
        self.timeouts: List[Optional[int]] = []
        self.closed = False

    def row_text(self, row: int) -> str:
        return "".join(self._grid[row]).rstrip()

    def text(self) -> str:
        """Current screen contents, one line per row, trailing blanks removed."""
        return "\n".join(self.row_text(r) for r in range(self._rows)).rstrip("\n")

    def clear(self) -> None:
        self._grid[:, :] = " "

    def write(self, row: int, col: int, text: str) -> None:
        if not 0 <= row < self._rows:
            return
        for offset, char in enumerate(text):
            c = col + offset
            if 0 <= c < self._cols:
                self._grid[row, c] = char

    def refresh(self) -> None:
        self.frames.append(self.text())

    def read_key(self, timeout_ms: Optional[int] = None) -> Optional[str]:
        self.timeouts.append(timeout_ms)
        if self._keys:
            return self._keys.popleft()
        if timeout_ms is None:
            raise ScriptExhausted("blocking read_key() with no scripted keys left")
        return None

    def read_line(self, row: int, col: int, max_length: int) -> str:
        if not self._lines:
            raise ScriptExhausted("read_line() with no scripted lines left")
        line = self._lines.popleft()[:max_length]
        self.write(row, col, line)
        return line

    def close(self) -> None:
        self.closed = True
