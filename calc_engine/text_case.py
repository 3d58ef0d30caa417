"""
Text case conversion.

Six modes, each addressable by its display label or a short alias:

    lowercase         / lower
    UPPERCASE         / upper
    Title Case        / title
    Sentence case     / sentence
    Alternating case  / alternating
    Random case       / random

"Random case" is the only non-deterministic transform in the engine; two
calls with the same input are expected to differ.
"""

from __future__ import annotations

import random
import re
from typing import Any

from .models import TextCaseResult

_MODE_ALIASES: dict[str, str] = {
    "lowercase": "lower",
    "lower": "lower",
    "uppercase": "upper",
    "upper": "upper",
    "title case": "title",
    "title": "title",
    "sentence case": "sentence",
    "sentence": "sentence",
    "alternating case": "alternating",
    "alternating": "alternating",
    "random case": "random",
    "random": "random",
}

_SENTENCE_END_RE = re.compile(r"[.!?]")
_SENTENCE_SPLIT_RE = re.compile(r"([.!?]\s*)")


def text_case_converter(text: Any, mode: str) -> TextCaseResult:
    """Convert `text` to the requested case.

    Empty or whitespace-only input yields an empty result. An unknown mode
    returns the (stripped) text unchanged.
    """
    if text is None:
        return TextCaseResult(text_result="")
    stripped = str(text).strip()
    if not stripped:
        return TextCaseResult(text_result="")
    return TextCaseResult(text_result=convert_case(stripped, mode))


def convert_case(text: str, mode: str) -> str:
    """Apply a case transform to `text` as-is (no stripping)."""
    canonical = _MODE_ALIASES.get(str(mode).strip().lower())

    if canonical == "lower":
        return text.lower()
    if canonical == "upper":
        return text.upper()
    if canonical == "title":
        return _title_case(text)
    if canonical == "sentence":
        return _sentence_case(text)
    if canonical == "alternating":
        return _alternating_case(text)
    if canonical == "random":
        return _random_case(text)
    return text


# ─── Transforms ──────────────────────────────────────────────────────


def _title_case(text: str) -> str:
    """Capitalize each whitespace-delimited token, keeping line breaks."""
    lines = re.split(r"\r?\n", text)
    return "\n".join(
        " ".join(word[:1].upper() + word[1:] for word in line.lower().split())
        for line in lines
    )


def _sentence_case(text: str) -> str:
    lowered = text.lower()

    # No sentence-ending punctuation at all: only the first character
    if not _SENTENCE_END_RE.search(text):
        return lowered[:1].upper() + lowered[1:]

    parts = _SENTENCE_SPLIT_RE.split(lowered)
    capitalize_next = True
    result: list[str] = []

    for part in parts:
        if _SENTENCE_SPLIT_RE.fullmatch(part):
            capitalize_next = True
        elif capitalize_next and part.strip():
            part = _capitalize_first_letter(part)
            capitalize_next = False
        result.append(part)

    return "".join(result)


def _capitalize_first_letter(part: str) -> str:
    for i, char in enumerate(part):
        if char.isalpha():
            return part[:i] + char.upper() + part[i + 1 :]
    return part


def _alternating_case(text: str) -> str:
    """Alternate lower/upper over letters only, starting lowercase."""
    chars: list[str] = []
    letter_index = 0

    for char in text:
        if not char.isalpha():
            chars.append(char)
            continue
        chars.append(char.lower() if letter_index % 2 == 0 else char.upper())
        letter_index += 1

    return "".join(chars)


def _random_case(text: str) -> str:
    return "".join(
        (char.lower() if random.random() < 0.5 else char.upper()) if char.isalpha() else char
        for char in text
    )
