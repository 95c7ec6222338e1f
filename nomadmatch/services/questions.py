"""
Dating Question Catalog - Ordered questions that fill a dating profile

Each question names the profile field it fills, the prompt shown to the
user, an input placeholder, and a parser kind. Parser kinds are a small
enum rather than callables so a catalog can be stored as plain JSON.

Parser Kinds:
    - IDENTITY: keep the raw text
    - INTEGER: leading integer, or None when the text has no number
    - STRING_LIST: comma separated tags, trimmed, empties dropped

Usage:
    from nomadmatch.services.questions import get_catalog, parse_answer

    for question in get_catalog():
        value = parse_answer(question.parser, raw_text)
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional, Tuple

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class ParserKind(str, Enum):
    """How a raw wizard answer is converted before it is stored."""

    IDENTITY = "identity"
    INTEGER = "integer"
    STRING_LIST = "string_list"


@dataclass(frozen=True)
class WizardQuestion:
    """
    One catalog entry.

    Attributes:
        field: Profile field the answer is stored under
        question: Prompt shown to the user
        placeholder: Hint text for the input box
        parser: How to convert the raw answer
    """
    field: str
    question: str
    placeholder: str
    parser: ParserKind = ParserKind.IDENTITY


def parse_integer(raw: str) -> Optional[int]:
    """Parse a leading integer. Returns None instead of raising."""
    match = _LEADING_INT.match(raw or "")
    if not match:
        return None
    return int(match.group(1))


def parse_string_list(raw: str) -> List[str]:
    """Split comma separated text into trimmed, non-empty tokens."""
    return [token.strip() for token in (raw or "").split(",") if token.strip()]


def parse_answer(kind: ParserKind, raw: str) -> Any:
    """
    Convert raw wizard text into the value stored on the profile.

    Args:
        kind: Parser kind from the catalog entry
        raw: Text exactly as the user typed it

    Returns:
        int/None for INTEGER, list of str for STRING_LIST, raw text otherwise
    """
    if kind is ParserKind.INTEGER:
        return parse_integer(raw)
    if kind is ParserKind.STRING_LIST:
        return parse_string_list(raw)
    return raw


DATING_QUESTIONS: Tuple[WizardQuestion, ...] = (
    WizardQuestion(
        field="gender",
        question="First things first: how do you identify?",
        placeholder="e.g. female, male, non-binary",
    ),
    WizardQuestion(
        field="age",
        question="Hey! How young are you feeling these days?",
        placeholder="Enter your age...",
        parser=ParserKind.INTEGER,
    ),
    WizardQuestion(
        field="city",
        question="Where do you call home? (City)",
        placeholder="City name...",
    ),
    WizardQuestion(
        field="orientation",
        question="Who are you interested in? (guys/gals/anyone)?",
        placeholder="e.g. 'anyone'",
    ),
    WizardQuestion(
        field="interests",
        question="Got any fun hobbies or passions?",
        placeholder="e.g. cooking, gaming, reading",
        parser=ParserKind.STRING_LIST,
    ),
    WizardQuestion(
        field="favorite_food",
        question="What's your go-to comfort food?",
        placeholder="Pizza, sushi, etc.",
    ),
    WizardQuestion(
        field="fun_fact",
        question="Tell us one fun fact about you!",
        placeholder="I can solve a Rubik's Cube in 30s",
    ),
    WizardQuestion(
        field="relationship_goals",
        question="What are you hoping to find?",
        placeholder="Something serious, casual, friendship...",
    ),
    WizardQuestion(
        field="occupation",
        question="What do you do for a living?",
        placeholder="Software engineer, chef, nomad...",
    ),
    WizardQuestion(
        field="education",
        question="What's your education background?",
        placeholder="Bachelor's, Master's, self-taught...",
    ),
    WizardQuestion(
        field="hobbies",
        question="How do you spend a free afternoon?",
        placeholder="e.g. photography, yoga, hiking",
        parser=ParserKind.STRING_LIST,
    ),
    WizardQuestion(
        field="favorite_movie",
        question="Which movie could you watch on repeat?",
        placeholder="Inception, Amelie...",
    ),
)


def load_catalog(path: str) -> Tuple[WizardQuestion, ...]:
    """
    Load a question catalog from a JSON file.

    The file holds a list of objects with `field`, `question`,
    `placeholder` and an optional `parser` (one of the ParserKind values).

    Raises:
        ValueError: If an entry is missing keys or names an unknown parser
    """
    entries = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(entries, list):
        raise ValueError(f"Question catalog must be a JSON list: {path}")

    questions = []
    for entry in entries:
        try:
            questions.append(WizardQuestion(
                field=entry["field"],
                question=entry["question"],
                placeholder=entry.get("placeholder", ""),
                parser=ParserKind(entry.get("parser", ParserKind.IDENTITY.value)),
            ))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid question entry {entry!r}: {e}") from e

    logger.info(f"Loaded {len(questions)} dating questions from {path}")
    return tuple(questions)


@lru_cache
def get_catalog() -> Tuple[WizardQuestion, ...]:
    """Active catalog: the configured JSON file, or the built-in questions."""
    from nomadmatch.config import get_settings

    path = get_settings().dating_questions_path
    if path:
        return load_catalog(path)
    return DATING_QUESTIONS
