from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import InvalidQuestionsError
from .models import Round


logger = logging.getLogger(__name__)

IMAGES_PER_ROUND = 4


def parse_questions(data: Any) -> list[Round]:
    """Validate a decoded questions document.

    The document is a list of ``{"word": str, "images": [str, str, str, str]}``
    objects, played in order.
    """
    if not isinstance(data, list):
        raise InvalidQuestionsError("questions document must be a list")

    rounds: list[Round] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise InvalidQuestionsError(f"round {idx + 1}: expected an object")

        word = item.get("word")
        if not isinstance(word, str) or not word.strip():
            raise InvalidQuestionsError(f"round {idx + 1}: missing word")

        images = item.get("images")
        if not isinstance(images, list) or len(images) != IMAGES_PER_ROUND:
            raise InvalidQuestionsError(
                f"round {idx + 1}: expected exactly {IMAGES_PER_ROUND} images"
            )
        if not all(isinstance(i, str) and i for i in images):
            raise InvalidQuestionsError(f"round {idx + 1}: image references must be strings")

        rounds.append(Round(word=word.strip(), images=tuple(images)))

    return rounds


def load_questions(path: str | Path) -> list[Round]:
    p = Path(path)
    try:
        with p.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise InvalidQuestionsError(f"cannot read {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidQuestionsError(f"{p} is not valid JSON: {exc}") from exc

    rounds = parse_questions(data)
    logger.info("Loaded %d rounds from %s", len(rounds), p)
    return rounds
