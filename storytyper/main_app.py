"""Main application loop: typing tests and their results, one story part at a time."""

import logging
from typing import Union

from .pipeline import start_pipeline
from .results import Results
from .typing_test import Test, Key, ESC, CONTROL
from .ui import TerminalUI


logger = logging.getLogger(__name__)

State = Union[Test, Results]

INTERRUPT = Key("c", frozenset([CONTROL]))
RESTART = Key("r")
QUIT = Key("q")


def render(ui, state: State):
    if isinstance(state, Test):
        ui.draw_test(state)
    elif isinstance(state, Results):
        ui.draw_results(state)
    else:
        raise TypeError(f"Unknown state: {state!r}")


def next_test(consumer) -> Test:
    part = consumer.next_story_part()
    logger.info(f"📖 New test with {len(part.section)} words")
    return Test.from_story_part(part)


def run_session(ui, consumer) -> State:
    """Drive tests and results from key presses until the user quits.

    Returns the state the session ended in.
    """
    state: State = next_test(consumer)
    render(ui, state)

    while True:
        key = ui.read_key()
        if key == INTERRUPT:
            logger.info("🛑 Interrupted by user")
            break

        if isinstance(state, Test):
            if key == Key(ESC):
                state = Results.from_test(state)
            else:
                state.handle_key(key)
                if state.complete:
                    state = Results.from_test(state)
            if isinstance(state, Results):
                logger.info(f"🎯 Test finished: {state.wpm:.1f} WPM, {state.accuracy_percent:.1f}% accuracy")
        elif isinstance(state, Results):
            if key == RESTART:
                state = next_test(consumer)
            elif key in (QUIT, Key(ESC)):
                break

        render(ui, state)

    return state


def run_app(stdscr, settings, provider):
    """Run inside curses.wrapper: start story generation and the session."""
    ui = TerminalUI(wait_image=settings.wait_image)
    ui.setup_screen(stdscr)

    producer, consumer = start_pipeline(provider, settings, on_wait=ui.draw_wait)
    try:
        return run_session(ui, consumer)
    finally:
        producer.stop()
