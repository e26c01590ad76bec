"""Tokenizer for order text."""
import re
from typing import List

from snacktrack.services.ordering.vocabulary import DEFAULT_VOCABULARY, Vocabulary

_PUNCTUATION_RE = re.compile(r"[.,!?]")


class Tokenizer:
    """Lowercases, protects compound phrases and drops filler words."""

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary
        # Longest first so "pritong manok" is not broken by a shorter overlap
        phrases = sorted(
            {phrase.lower() for phrase in vocabulary.compound_phrases},
            key=len,
            reverse=True,
        )
        self._compound_patterns = [
            (re.compile(r"(?<!\w)" + re.escape(phrase) + r"(?!\w)"), phrase.replace(" ", "_"))
            for phrase in phrases
        ]

    def clean_text(self, text: str) -> List[str]:
        """
        Turn order text into a list of tokens.

        Compound phrases come out as a single token with their spaces intact.
        """
        processed = (text or "").lower()
        for pattern, joined in self._compound_patterns:
            processed = pattern.sub(joined, processed)

        processed = _PUNCTUATION_RE.sub(" ", processed)
        tokens = [token.replace("_", " ") for token in processed.split()]
        return [token for token in tokens if token not in self.vocabulary.filter_words]
