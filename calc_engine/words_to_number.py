"""
Convert written-out English number words back to their numeric value.

The inverse of `number_to_words` in "words" mode, used to check that the
formatter's output reads back to the number it was given.

Supported patterns:
    "One Million Two Hundred Fifty Thousand"   → 1250000
    "minus forty-two"                          → -42
    "one hundred twenty-three point four five" → 123.45
    "Two Thousand Dollars"                     → 2000  (ignores "Dollars")
"""

from __future__ import annotations

from decimal import Decimal

from .number_to_words import EnglishWords

# ─── Word Lookup Tables ──────────────────────────────────────────────

_ONES: dict[str, int] = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
}

_TENS: dict[str, int] = {
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
}

_SCALES: dict[str, int] = {
    name: 10 ** (3 * index) for index, name in enumerate(EnglishWords.scales) if name
}

_DIGITS: dict[str, str] = {word: str(value) for word, value in _ONES.items() if value < 10}

# Words to strip from the input (not part of the number itself)
_IGNORE: set[str] = {
    "and",
    "dollars",
    "dollar",
    "cents",
    "cent",
    "only",
    "the",
    "of",
}


# ─── Word Classifier ─────────────────────────────────────────────────


def _classify_and_apply(word: str, current: int, result: int, source: str) -> tuple[int, int]:
    """Classify a single number word and update the running accumulators.

    Returns:
        (new_current, new_result) after processing the word.

    Raises:
        ValueError: If the word is not a recognised number token.
    """
    if word in _ONES:
        return current + _ONES[word], result
    if word in _TENS:
        return current + _TENS[word], result
    if word == "hundred":
        return (current or 1) * 100, result
    if word in _SCALES:
        return 0, result + (current or 1) * _SCALES[word]
    raise ValueError(f"Unrecognized number word: {word!r} in {source!r}")


# ─── Main Converter ─────────────────────────────────────────────────


def words_to_number(text: str) -> Decimal:
    """Convert English number words to a Decimal value.

    Raises:
        ValueError: If the text is empty or contains unrecognized words.

    Algorithm:
        The integer part keeps two accumulators: `result` holds completed
        scale groups, `current` the group being built. Ones/tens add to
        `current`, "hundred" multiplies it, a scale word flushes
        `current * scale` into `result`. Everything after "point" must be
        single digit words and is read as the fractional digits.
    """
    if not text or not text.strip():
        raise ValueError("Empty text cannot be converted to a number")

    normalized = text.strip().strip("()[]")
    words = normalized.lower().replace("-", " ").replace(",", " ").split()
    words = [w for w in words if w not in _IGNORE]

    negative = bool(words) and words[0] == "minus"
    if negative:
        words = words[1:]

    fraction_digits = ""
    if "point" in words:
        split = words.index("point")
        words, fraction_words = words[:split], words[split + 1 :]
        if not fraction_words:
            raise ValueError(f"Missing digits after 'point' in: {text!r}")
        for word in fraction_words:
            if word not in _DIGITS:
                raise ValueError(f"Unrecognized digit word: {word!r} in {normalized!r}")
            fraction_digits += _DIGITS[word]

    if not words:
        raise ValueError(f"No number words found in: {text!r}")

    result = 0
    current = 0

    for word in words:
        current, result = _classify_and_apply(word, current, result, normalized)

    result += current

    # Tokens parsed to 0 without an explicit "zero" means the input was nonsense
    if result == 0 and "zero" not in words:
        raise ValueError(f"Could not parse a valid number from: {text!r}")

    value = Decimal(f"{result}.{fraction_digits}" if fraction_digits else result)
    return value.copy_negate() if negative else value
