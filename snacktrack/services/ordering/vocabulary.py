"""Word lists used by the order text parser.

Every list is keyed by category and then by language, so a new language is
one more key in each table. The parser components receive a ``Vocabulary``
at construction time and never read module state.
"""
from functools import cached_property
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict

PhraseTable = Dict[str, Dict[str, Tuple[str, ...]]]


class Vocabulary(BaseModel):
    """Immutable set of indicator, filter and quantity words."""

    model_config = ConfigDict(frozen=True)

    tables: PhraseTable
    quantities: Dict[str, Dict[str, int]]
    payment_methods: PhraseTable
    compound_phrases: Tuple[str, ...] = ()

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Vocabulary":
        """Load a vocabulary from a YAML file with the same shape as the model."""
        with open(path, "r", encoding="utf-8") as f:
            return cls(**yaml.safe_load(f))

    def phrases(self, category: str) -> Tuple[str, ...]:
        """All phrases of a category, in table order, across languages."""
        merged: Dict[str, None] = {}
        for phrases in self.tables.get(category, {}).values():
            for phrase in phrases:
                merged.setdefault(phrase.lower(), None)
        return tuple(merged)

    def quantity(self, token: str) -> Optional[int]:
        """Quantity value of a token, or None if it is not a quantity word."""
        return self.quantity_words.get(token.lower())

    @cached_property
    def quantity_words(self) -> Dict[str, int]:
        words: Dict[str, int] = {}
        for table in self.quantities.values():
            for word, value in table.items():
                words.setdefault(str(word).lower(), value)
        return words

    @cached_property
    def filter_words(self) -> FrozenSet[str]:
        return frozenset(self.phrases("filter"))

    @cached_property
    def payment_phrases(self) -> List[Tuple[str, str]]:
        """(method, phrase) pairs, longest phrase first."""
        pairs = [
            (method, phrase.lower())
            for method, languages in self.payment_methods.items()
            for phrases in languages.values()
            for phrase in phrases
        ]
        return sorted(pairs, key=lambda pair: len(pair[1]), reverse=True)

    @cached_property
    def stop_words(self) -> FrozenSet[str]:
        """Single words that end a special-instruction phrase."""
        words = set(self.phrases("conjunction"))
        words.update(self.phrases("instruction"))
        words.update(self.phrases("time_prefix"))
        words.update(self.quantity_words)
        words.update(p for p in self.phrases("discount") if " " not in p)
        words.update(p for _, p in self.payment_phrases if " " not in p)
        return frozenset(words)


DEFAULT_VOCABULARY = Vocabulary(
    tables={
        "filter": {
            "english": (
                "i", "want", "to", "order", "please", "and", "with", "also",
                "get", "would", "like", "a", "an", "the", "can", "me", "for",
            ),
            "tagalog": (
                "po", "nga", "sana", "ako", "gusto", "ko", "ng", "at", "pati",
                "rin", "din", "mag", "order", "pa", "yung", "na", "lang",
                "akin", "para", "sa", "dito", "pabili",
            ),
        },
        "conjunction": {
            "english": ("and", "then", "plus", "also"),
            "tagalog": ("at", "tapos", "saka", "pati"),
        },
        "address": {
            "english": ("deliver", "address", "location", "send", "to"),
            "tagalog": (
                "address", "lugar", "lokasyon", "dito", "sa", "padala",
                "deliver", "ipadala", "punta", "doon", "diyan",
            ),
        },
        "name": {
            "english": ("name:", "name is", "this is", "i am", "caller:", "from:"),
            "tagalog": ("pangalan:", "ako si", "ito si", "tawag:", "mula kay:"),
        },
        "phone": {
            "english": ("phone:", "contact:", "number:", "cell:", "mobile:"),
            "tagalog": ("numero:", "telepono:", "contact:", "cellphone:"),
        },
        "pickup": {
            "english": ("pick up", "pickup", "pick-up", "take out", "takeout", "take-out"),
            "tagalog": ("kukunin", "kunin", "babalikan", "dadaanan", "susunduin"),
        },
        # Words after "to" that mean the customer is still ordering
        "order_verb": {
            "english": ("order", "get", "buy", "have", "try", "eat"),
            "tagalog": ("mag", "bumili", "umorder", "kumain"),
        },
        "instruction": {
            "english": ("with", "no", "extra", "without"),
            "tagalog": ("walang", "wala", "dagdagan", "dagdag"),
        },
        "time_prefix": {
            "english": ("at", "by", "around", "before", "after"),
            "tagalog": ("alas", "mga"),
        },
        "discount": {
            "english": (
                "discount code", "promo code", "voucher code",
                "discount", "promo", "voucher", "coupon", "code",
            ),
            "tagalog": ("kupon",),
        },
    },
    quantities={
        "english": {
            "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
            "1": 1, "2": 2, "3": 3, "4": 4, "5": 5,
        },
        "tagalog": {
            "isa": 1, "isang": 1, "dalawa": 2, "dalawang": 2,
            "tatlo": 3, "tatlong": 3, "apat": 4, "lima": 5, "limang": 5,
            "1": 1, "2": 2, "3": 3, "4": 4, "5": 5,
        },
    },
    payment_methods={
        "cash": {
            "english": ("cash on delivery", "cash", "cod"),
            "tagalog": ("bayad pagdating",),
        },
        "card": {
            "english": ("credit card", "debit card", "card"),
            "tagalog": ("kard",),
        },
        "gcash": {
            "english": ("gcash", "g-cash"),
        },
        "paymaya": {
            "english": ("paymaya", "maya"),
        },
    },
    compound_phrases=(
        "pritong manok",
        "pritong patatas",
        "pakpak ng manok",
        "ice cream",
        "soft drink",
        "french fries",
        "fried chicken",
    ),
)
