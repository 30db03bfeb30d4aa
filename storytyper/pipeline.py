"""Background story generation handed to the foreground one part at a time.

A single producer thread keeps a conversation going with the content
provider. Each round it asks for the next piece of story text, asks for a
picture of it (retrying until the picture arrives), and puts the result on
a queue that holds at most one part. The foreground consumer takes parts
off that queue whenever a new typing test starts.

Text failures end the producer: a broken conversation does not heal by
asking again. Picture failures are retried, forever by default.
"""

import queue
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from . import prompts
from .config import StoryTyperError
from .story_client import ASSISTANT, ImageGenerationError, TextGenerationError


logger = logging.getLogger(__name__)


class PipelineClosedError(StoryTyperError):
    """The producer has stopped and no more story parts will arrive."""


@dataclass(frozen=True)
class StoryPart:
    section: Tuple[str, ...]
    image: Path


class Conversation:
    """Fixed preamble followed by alternating assistant/user turns."""

    def __init__(self, preamble):
        self.preamble = list(preamble)
        self.turns = []

    def messages(self):
        return self.preamble + self.turns

    def extend(self, reply, follow_up):
        self.turns.append({"role": ASSISTANT, "content": reply})
        self.turns.append(follow_up)


class ContentProducer:
    def __init__(self, provider, conversation, handoff, settings, follow_up=None):
        self.provider = provider
        self.conversation = conversation
        self.handoff = handoff
        self.settings = settings
        self.follow_up = follow_up or prompts.continue_turn(settings.language)
        self.error: Optional[BaseException] = None
        self.parts_published = 0
        self._stop = threading.Event()
        self._thread = None

    def start(self):
        self._thread = threading.Thread(target=self.run, name="story-producer", daemon=True)
        self._thread.start()
        return self

    def stop(self):
        self._stop.set()

    @property
    def stopped(self):
        return self._stop.is_set()

    def is_alive(self):
        return self._thread is not None and self._thread.is_alive()

    def run(self):
        logger.info("📚 Story producer started")
        try:
            while not self.stopped:
                part = self.next_part()
                if part is None or not self.publish(part):
                    break
        except Exception as e:
            self.error = e
            logger.exception(f"❌ Story producer failed: {e}")
        logger.info(f"🛑 Story producer finished after {self.parts_published} parts")

    def next_part(self) -> Optional[StoryPart]:
        """Generate one story part and extend the conversation with it.

        Returns None when a stop was requested during picture retries.
        """
        text = self.provider.generate_text(self.conversation.messages())
        section = tuple(text.split())
        if not section:
            raise TextGenerationError("Provider returned no words")
        image = self.generate_image(section)
        if image is None:
            return None
        self.conversation.extend(text, dict(self.follow_up))
        return StoryPart(section, image)

    def generate_image(self, words):
        limit = self.settings.image_retry_limit
        attempt = 0
        while True:
            attempt += 1
            try:
                image = self.provider.generate_image(words)
                if attempt > 1:
                    logger.info(f"🖼️ Picture generated after {attempt} attempts")
                return image
            except ImageGenerationError as e:
                logger.warning(f"⚠️ Picture attempt {attempt} failed: {e}")
                if limit is not None and attempt >= limit:
                    raise
            wait = self.backoff(attempt)
            if wait:
                logger.debug(f"⏳ Retrying picture in {wait:.1f}s...")
            if self._stop.wait(wait):
                return None

    def backoff(self, attempt) -> float:
        base = self.settings.image_retry_backoff
        if not base:
            return 0
        return min(base * 2 ** (attempt - 1), self.settings.image_retry_backoff_max)

    def publish(self, part, poll_interval=0.1) -> bool:
        """Block until the part is on the queue; False if stopped first."""
        while not self.stopped:
            try:
                self.handoff.put(part, timeout=poll_interval)
            except queue.Full:
                continue
            self.parts_published += 1
            logger.debug(f"📦 Published story part {self.parts_published} ({len(part.section)} words)")
            return True
        return False


class ContentConsumer:
    def __init__(self, handoff, producer, on_wait=None, poll_interval=0.1):
        self.handoff = handoff
        self.producer = producer
        self.on_wait = on_wait
        self.poll_interval = poll_interval

    def next_story_part(self) -> StoryPart:
        """Wait for the next story part, showing the waiting screen meanwhile."""
        if self.on_wait:
            self.on_wait()
        while True:
            try:
                return self.handoff.get(timeout=self.poll_interval)
            except queue.Empty:
                if self.producer.is_alive():
                    continue
            # The producer may have published just before exiting
            try:
                return self.handoff.get_nowait()
            except queue.Empty:
                raise PipelineClosedError("Story generation stopped") from self.producer.error


def start_pipeline(provider, settings, on_wait=None, rng=None):
    """Start the producer thread and return it with a consumer for its parts."""
    characters = prompts.pick_characters(settings.characters_per_story, settings.characters or None, rng)
    logger.info(f"🎭 New story with {characters}")
    conversation = Conversation(prompts.opening_turns(settings.language, characters))
    handoff = queue.Queue(maxsize=1)
    producer = ContentProducer(provider, conversation, handoff, settings).start()
    return producer, ContentConsumer(handoff, producer, on_wait=on_wait)
