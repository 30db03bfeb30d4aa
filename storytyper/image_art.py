"""Render a picture file as rows of text for the terminal."""

import logging

from PIL import Image, UnidentifiedImageError


logger = logging.getLogger(__name__)

# Dark to light
RAMP = "@%#*+=-:. "


def render_to_lines(path, width, height, ramp=RAMP):
    """Scale the picture into at most width x height characters.

    Terminal cells are about twice as tall as they are wide, so the row
    count is halved relative to the picture's aspect ratio.
    """
    if width <= 0 or height <= 0:
        return []
    try:
        with Image.open(path) as img:
            gray = img.convert("L")
    except (OSError, UnidentifiedImageError) as e:
        logger.warning(f"⚠️ Could not open picture {path}: {e}")
        return []

    w, h = gray.size
    cols = min(width, w)
    rows = max(1, min(height, int(h * cols / w / 2)))
    gray = gray.resize((cols, rows))

    pixels = gray.tobytes()
    lines = []
    for row in range(rows):
        values = pixels[row * cols:(row + 1) * cols]
        lines.append("".join(ramp[v * (len(ramp) - 1) // 255] for v in values))
    return lines
