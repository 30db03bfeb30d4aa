"""Conversation preamble used to start and continue a story."""

import random

SYSTEM_PROMPTS = [
    "You are a storyteller and a typing teacher working with a young reader.",
    "Tell an adventure story featuring the characters {characters}.",
    "Use descriptive language full of adjectives, colors and visual detail.",
    "After each response the user will ask you to continue the story. Add exciting plot twists.",
    "Keep the story and its vocabulary appropriate for a nine year old.",
    "The reader types the story to practice typing, so prefer common words and plain punctuation.",
    "Each part is also turned into a picture, so keep it visual and avoid words an image "
    "filter could reject.",
    "Responses should be no longer than 50 words.",
    "Do not answer the user's prompts directly, use them only to continue the story.",
]

OPENING_PROMPT = (
    "Start an exciting story with {characters}. Use descriptive words and color with detailed "
    "imagery. Write it in {language}. Use no more than 50 words."
)

CONTINUE_PROMPT = (
    "Continue the story in {language}. Use no more than 50 words. Use descriptive words and "
    "color with detailed imagery. Do not respond to this directly."
)

CHARACTERS = [
    "Captain Juniper",
    "Milo the fox",
    "Professor Pebble",
    "Aunt Marigold",
    "a shy dragon named Ember",
    "Rosa the inventor",
    "Sir Bramble",
    "the twins Kit and Kai",
    "Old Man Willow",
    "a talking compass",
]


def pick_characters(count, pool=None, rng=None):
    rng = rng or random
    pool = list(pool or CHARACTERS)
    chosen = rng.sample(pool, min(count, len(pool)))
    return ", ".join(chosen)


def opening_turns(language, characters):
    """System preamble plus the first user request of a new story."""
    turns = [{"role": "system", "content": p.format(characters=characters)} for p in SYSTEM_PROMPTS]
    turns.append({"role": "user", "content": OPENING_PROMPT.format(characters=characters, language=language)})
    return turns


def continue_turn(language):
    return {"role": "user", "content": CONTINUE_PROMPT.format(language=language)}
