"""Extractors for order metadata found in free text.

Each extractor returns the value it found (or None) together with the text
that remains once its own match is cut out. They are applied in a fixed
order, each on the previous one's remainder.
"""
import re
from typing import Any, List, NamedTuple, Optional, Tuple

from snacktrack.services.ordering.models import PaymentMethod
from snacktrack.services.ordering.segmenter import indicator_pattern
from snacktrack.services.ordering.vocabulary import DEFAULT_VOCABULARY, Vocabulary

# Most words an instruction may run after its indicator
MAX_INSTRUCTION_WORDS = 3

_WORD_RE = re.compile(r"[\w'-]+")
_BREAK_RE = re.compile(r"[,.;:!?\n]")
_TIME_EXPRESSION = r"\d{1,2}[:.]\d{2}(?:\s*[ap]m)?|\d{1,2}\s*[ap]m"


class Extraction(NamedTuple):
    value: Any
    remaining_text: str


def remove_spans(text: str, spans: List[Tuple[int, int]]) -> str:
    """Cut the given (start, end) spans out of the text."""
    if not spans:
        return text
    pieces = []
    cursor = 0
    for start, end in sorted(spans):
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])

    result = pieces[0].rstrip()
    for piece in pieces[1:]:
        piece = piece.lstrip()
        if result and piece[:1].isalnum():
            result = f"{result} {piece}"
        else:
            result = f"{result}{piece}"
        result = result.rstrip()
    return result.strip()


class MetadataExtractor:
    """Pickup, instruction, time, payment and discount extraction."""

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary
        self._pickup_patterns = [
            indicator_pattern(phrase) for phrase in vocabulary.phrases("pickup")
        ]
        self._instruction_words = frozenset(vocabulary.phrases("instruction"))

        prefixes = "|".join(re.escape(p) for p in vocabulary.phrases("time_prefix"))
        self._time_re = re.compile(
            rf"(?<!\w)(?:{prefixes})\s+(?P<time>{_TIME_EXPRESSION})(?!\w)",
            re.IGNORECASE,
        )

        self._payment_patterns = [
            (PaymentMethod(method), indicator_pattern(phrase))
            for method, phrase in vocabulary.payment_phrases
        ]

        discounts = sorted(vocabulary.phrases("discount"), key=len, reverse=True)
        indicators = "|".join(re.escape(d) for d in discounts)
        self._discount_re = re.compile(
            rf"(?<!\w)(?:{indicators})(?!\w)(?:\s*:?\s*)(?P<code>[A-Za-z0-9]+)",
            re.IGNORECASE,
        )

    def extract_pickup(self, text: str) -> Extraction:
        """Value is True when the customer will pick the order up."""
        for pattern in self._pickup_patterns:
            match = pattern.search(text)
            if match:
                return Extraction(True, remove_spans(text, [match.span()]))
        return Extraction(False, text)

    def _ends_instruction(self, text: str, previous: re.Match, word: re.Match) -> bool:
        if _BREAK_RE.search(text[previous.end():word.start()]):
            return True
        value = word.group().lower()
        return value in self.vocabulary.stop_words or value[0].isdigit()

    def extract_instructions(self, text: str) -> Extraction:
        """
        Collect phrases such as "no onions" or "extra cheese".

        An instruction runs from its indicator word to the next punctuation,
        conjunction, quantity or indicator. Value is the comma-joined phrases
        in order of appearance.
        """
        words = list(_WORD_RE.finditer(text))
        spans = []
        collected = []

        i = 0
        while i < len(words):
            if words[i].group().lower() not in self._instruction_words:
                i += 1
                continue

            j = i + 1
            limit = min(len(words), i + 1 + MAX_INSTRUCTION_WORDS)
            while j < limit and not self._ends_instruction(text, words[j - 1], words[j]):
                j += 1

            if j == i + 1:
                # Indicator with nothing after it, e.g. "with" in "with extra cheese"
                i += 1
                continue

            start, end = words[i].start(), words[j - 1].end()
            spans.append((start, end))
            collected.append(text[start:end])
            i = j

        if not collected:
            return Extraction(None, text)
        return Extraction(", ".join(collected), remove_spans(text, spans))

    def extract_time(self, text: str) -> Extraction:
        """Value is the raw time expression, e.g. "5:30pm"."""
        match = self._time_re.search(text)
        if not match:
            return Extraction(None, text)
        return Extraction(match.group("time"), remove_spans(text, [match.span()]))

    def extract_payment_method(self, text: str) -> Extraction:
        """Earliest payment phrase in the text wins."""
        best: Optional[Tuple[PaymentMethod, re.Match]] = None
        for method, pattern in self._payment_patterns:
            match = pattern.search(text)
            if match and (best is None or match.start() < best[1].start()):
                best = (method, match)

        if best is None:
            return Extraction(None, text)
        method, match = best
        return Extraction(method, remove_spans(text, [match.span()]))

    def extract_discount_code(self, text: str) -> Extraction:
        """Value is the upper-cased code following a discount indicator."""
        for match in self._discount_re.finditer(text):
            code = match.group("code")
            if code.lower() in self.vocabulary.filter_words:
                continue
            return Extraction(code.upper(), remove_spans(text, [match.span()]))
        return Extraction(None, text)
