#!/usr/bin/env python3
"""
storytyper - Main executable entry point
Allows the module to be executed with: python -m storytyper
"""

import curses
import logging
import argparse

from wasabi import Printer

from .auth import get_api_key
from .config import StoryTyperError, load_settings, setup_logging
from .main_app import run_app
from .story_client import ClaudeStoryProvider


logger = logging.getLogger(__name__)
msg = Printer()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="storytyper", description="Terminal typing test over a generated story.")
    parser.add_argument("-d", "--debug", action="store_true", help="Write debug output to the log file")
    parser.add_argument("-c", "--config", help="Use config file")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    try:
        settings = load_settings(args.config)
        setup_logging(args.debug)
        if args.debug:
            logger.debug(f"⚙️ Settings: {settings.to_dict()}")

        provider = ClaudeStoryProvider(
            claude_key=get_api_key("claude"),
            openai_key=get_api_key("openai"),
            settings=settings,
        )
        curses.wrapper(run_app, settings, provider)
    except KeyboardInterrupt:
        msg.warn("Interrupted")
    except StoryTyperError as e:
        logger.error(f"❌ Fatal error: {e}")
        msg.fail("Fatal error", str(e), exits=1)
    msg.good("Goodbye!")


if __name__ == "__main__":
    main()
