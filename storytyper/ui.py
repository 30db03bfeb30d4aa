"""Curses screens for the typing test, its results and the waiting screen."""

import curses
import unicodedata
from functools import lru_cache

from . import image_art
from .typing_test import Key, ENTER, BACKSPACE, ESC, TAB, CONTROL


# Color pairs
HEADER = 1
CORRECT = 2
WRONG = 3
CURRENT = 8


def display_width(text):
    """Calculate the display width of text, accounting for Unicode characters"""
    width = 0
    for char in text:
        category = unicodedata.category(char)
        if category in ('Mn', 'Mc', 'Me'):  # Combining marks don't add width
            continue
        eaw = unicodedata.east_asian_width(char)
        if eaw in ('F', 'W'):
            width += 2
        elif category[0] == 'C':
            continue
        else:
            width += 1
    return width


def translate_key(ch):
    """Map a curses ``get_wch`` result to a Key, or None if irrelevant."""
    if isinstance(ch, int):
        if ch == curses.KEY_BACKSPACE:
            return Key(BACKSPACE)
        if ch == curses.KEY_ENTER:
            return Key(ENTER)
        return None

    if ch in ("\n", "\r"):
        return Key(ENTER)
    if ch == "\x7f":
        return Key(BACKSPACE)
    if ch == "\x1b":
        return Key(ESC)
    if ch == "\t":
        return Key(TAB)
    # Ctrl+Backspace arrives as Ctrl+H
    if len(ch) == 1 and ord(ch) < 32:
        return Key(chr(ord(ch) + 96), frozenset([CONTROL]))
    return Key(ch)


@lru_cache(maxsize=8)
def _picture(path, width, height):
    return tuple(image_art.render_to_lines(path, width, height))


def word_spans(word, is_current):
    """Split one word into (text, color pair) pieces for drawing."""
    if is_current:
        spans = []
        for i, ch in enumerate(word.progress):
            ok = i < len(word.text) and word.text[i] == ch
            spans.append((ch, CORRECT if ok else WRONG))
        rest = word.text[len(word.progress):]
        if rest:
            spans.append((rest, CURRENT))
        return spans
    if word.events:
        ok = word.progress == word.text
        return [(word.text, CORRECT if ok else WRONG)]
    return [(word.text, 0)]


class TerminalUI:
    def __init__(self, stdscr=None, wait_image=None):
        self.stdscr = stdscr
        self.wait_image = wait_image
        self.height = 0
        self.width = 0

    def init_colors(self):
        curses.start_color()
        curses.init_pair(HEADER, curses.COLOR_WHITE, curses.COLOR_BLUE)
        curses.init_pair(CORRECT, curses.COLOR_GREEN, curses.COLOR_BLACK)
        curses.init_pair(WRONG, curses.COLOR_RED, curses.COLOR_BLACK)
        curses.init_pair(CURRENT, curses.COLOR_YELLOW, curses.COLOR_BLACK)

    def setup_screen(self, stdscr):
        self.stdscr = stdscr
        self.height, self.width = stdscr.getmaxyx()
        curses.curs_set(0)  # Hide cursor
        curses.raw()  # Ctrl+C arrives as a key instead of SIGINT
        stdscr.keypad(True)
        self.init_colors()
        stdscr.clear()

    def read_key(self):
        while True:
            try:
                key = translate_key(self.stdscr.get_wch())
            except curses.error:
                continue
            if key is not None:
                return key

    def _addstr(self, y, x, text, attr=0):
        if y < 0 or y >= self.height or x >= self.width:
            return
        try:
            self.stdscr.addstr(y, x, text[:max(0, self.width - x - 1)], attr)
        except curses.error:
            pass

    def _begin(self, title):
        self.height, self.width = self.stdscr.getmaxyx()
        self.stdscr.erase()
        self.stdscr.box()
        self._addstr(0, max(1, (self.width - display_width(title)) // 2), title,
                     curses.color_pair(HEADER) | curses.A_BOLD)

    def _draw_picture(self, path, top, left=2):
        if path is None:
            return
        width = self.width - left - 2
        height = self.height - top - 2
        for offset, line in enumerate(_picture(str(path), width, height)):
            self._addstr(top + offset, left, line)

    def draw_wait(self):
        self._begin(" 📖 storytyper ")
        text = "Loading..."
        self._addstr(self.height // 3, max(1, (self.width - len(text)) // 2), text, curses.A_BOLD)
        self._draw_picture(self.wait_image, self.height // 3 + 2)
        self.stdscr.refresh()

    def draw_test(self, test):
        self._begin(" 📖 Type the story ")
        max_x = self.width - 2
        y, x = 2, 2
        for index, word in enumerate(test.words):
            width = max(display_width(word.text), display_width(word.progress))
            if x + width > max_x and x > 2:
                y, x = y + 1, 2
            if y >= self.height - 2:
                break
            current = index == test.current_word and not test.complete
            for text, pair in word_spans(word, current):
                attr = curses.color_pair(pair)
                if current:
                    attr |= curses.A_UNDERLINE
                self._addstr(y, x, text, attr)
                x += display_width(text)
            x += 1
        self._draw_picture(test.image, y + 2)
        self.stdscr.refresh()

    def draw_results(self, results):
        self._begin(" 🎉 Results ")
        lines = [
            f"WPM: {results.wpm:.1f}",
            f"Accuracy: {results.accuracy_percent:.1f}% ({results.accuracy.overall})",
            f"Time: {results.elapsed:.1f}s",
            f"Keystrokes: {results.correct} correct, {results.incorrect} incorrect",
            "",
        ]
        worst = results.worst_keys()
        if worst:
            lines.append("Worst keys: " + ", ".join(f"{key} {float(frac) * 100:.0f}%" for key, frac in worst))
        if results.missed_words:
            lines.append("Missed words: " + " ".join(results.missed_words))
        if results.slow_words:
            lines.append("Slow words: " + " ".join(results.slow_words))
        lines += ["", "Press 'r' for the next part of the story, 'q' to quit."]
        for offset, line in enumerate(lines):
            self._addstr(2 + offset, 2, line)
        self.stdscr.refresh()
