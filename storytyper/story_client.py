"""Story text and picture generation over the Claude and OpenAI HTTP APIs."""

import os
import uuid
import logging
from pathlib import Path

import requests

from .config import CLAUDE_URL, OPENAI_IMAGE_URL, StoryTyperError


logger = logging.getLogger(__name__)

SYSTEM = "system"
USER = "user"
ASSISTANT = "assistant"


class ProviderError(StoryTyperError):
    """A generation request failed."""


class TextGenerationError(ProviderError):
    pass


class ImageGenerationError(ProviderError):
    pass


class ContentProvider:
    """Capability the story pipeline needs from a generation service.

    ``history`` is an ordered list of ``{"role": ..., "content": ...}``
    turns with roles system, user or assistant. Failures must be raised
    as TextGenerationError / ImageGenerationError.
    """

    def generate_text(self, history) -> str:
        raise NotImplementedError

    def generate_image(self, prompt_words) -> Path:
        raise NotImplementedError


class ClaudeStoryProvider(ContentProvider):
    """Claude writes the story, the OpenAI images endpoint draws it."""

    def __init__(self, claude_key, openai_key, settings, session=None):
        self.claude_key = claude_key
        self.openai_key = openai_key
        self.settings = settings
        self.session = session or requests.Session()

    def generate_text(self, history) -> str:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.claude_key,
            "anthropic-version": "2023-06-01"
        }
        system = "\n".join(turn["content"] for turn in history if turn["role"] == SYSTEM)
        data = {
            "model": self.settings.model,
            "max_tokens": self.settings.max_tokens,
            "messages": [
                {"role": turn["role"], "content": turn["content"]}
                for turn in history if turn["role"] != SYSTEM
            ]
        }
        if system:
            data["system"] = system

        try:
            resp = self.session.post(CLAUDE_URL, headers=headers, json=data,
                                     timeout=self.settings.request_timeout)
            resp.raise_for_status()
            content = resp.json().get("content") or []
            parts = [part["text"] for part in content
                     if isinstance(part, dict) and part.get("type") == "text"]
            text = " ".join(parts).strip()
        except (requests.RequestException, ValueError, AttributeError, TypeError, KeyError) as e:
            raise TextGenerationError(f"Claude request failed: {e}") from e

        if not text:
            raise TextGenerationError("Claude returned no text")
        logger.debug(f"📝 Claude returned {len(text.split())} words")
        return text

    def generate_image(self, prompt_words) -> Path:
        prompt = " ".join([self.settings.image_prefix, *prompt_words]).strip()
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.openai_key}"
        }
        payload = {
            "model": self.settings.image_model,
            "prompt": prompt,
            "n": 1,
            "size": self.settings.image_size,
            "response_format": "url"
        }

        try:
            resp = self.session.post(OPENAI_IMAGE_URL, headers=headers, json=payload,
                                     timeout=self.settings.request_timeout)
            resp.raise_for_status()
            data = resp.json().get("data") or []
            if not data or not data[0].get("url"):
                raise ImageGenerationError(f"No image returned for prompt: {prompt!r}")
            return self._download(data[0]["url"])
        except (requests.RequestException, ValueError, OSError, AttributeError, TypeError, KeyError) as e:
            raise ImageGenerationError(f"Failed to create image for prompt {prompt!r}: {e}") from e

    def _download(self, url) -> Path:
        resp = self.session.get(url, timeout=self.settings.request_timeout)
        resp.raise_for_status()

        os.makedirs(self.settings.data_dir, exist_ok=True)
        path = Path(self.settings.data_dir) / f"{uuid.uuid4().hex}.png"
        with open(path, "wb") as f:
            f.write(resp.content)
        logger.debug(f"🖼️ Saved story image to {path}")
        return path
