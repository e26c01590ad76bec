"""Splits a chat message into customer info, order text and address."""
import re
from typing import List, NamedTuple, Optional, Pattern, Tuple

from snacktrack.services.ordering.vocabulary import DEFAULT_VOCABULARY, Vocabulary

# Address indicators closer than len(phrase) + this to a compound phrase are
# treated as part of the phrase. Tunable.
COMPOUND_PHRASE_MARGIN = 5

_NEXT_WORD_RE = re.compile(r"\W*(\w+)")


def indicator_pattern(indicator: str) -> Pattern:
    """Case-insensitive pattern matching an indicator as whole words."""
    pattern = r"(?<!\w)" + re.escape(indicator)
    if indicator[-1:].isalnum():
        pattern += r"(?!\w)"
    return re.compile(pattern, re.IGNORECASE)


def sanitize_phone(value: str) -> str:
    """Keep digits and '+' only."""
    return re.sub(r"[^\d+]", "", value)


class CustomerInfo(NamedTuple):
    customer_name: Optional[str]
    customer_phone: Optional[str]
    raw_phone: Optional[str]
    remaining_text: str


class AddressSplit(NamedTuple):
    order_text: str
    address: Optional[str]


class TextSegmenter:
    """Finds the customer-info lines and the address portion of a message."""

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary
        self._name_patterns = self._compile(vocabulary.phrases("name"))
        self._phone_patterns = self._compile(vocabulary.phrases("phone"))
        self._address_patterns = self._compile(vocabulary.phrases("address"))
        self._order_verbs = frozenset(vocabulary.phrases("order_verb"))

    @staticmethod
    def _compile(indicators: Tuple[str, ...]) -> List[Pattern]:
        return [indicator_pattern(indicator) for indicator in indicators]

    @staticmethod
    def _value_after(line: str, patterns: List[Pattern]) -> Optional[str]:
        """Text after the first indicator (in table order) found on the line."""
        for pattern in patterns:
            match = pattern.search(line)
            if match:
                return line[match.end():].strip()
        return None

    def extract_customer_info(self, text: str) -> CustomerInfo:
        """
        Pull the customer's name and phone out of a message.

        Lines that yield a name or phone are removed from the remaining text.
        The first name and the first phone found win.
        """
        if not text:
            return CustomerInfo(None, None, None, "")

        customer_name = None
        customer_phone = None
        raw_phone = None
        remaining_lines = []

        for line in text.split("\n"):
            is_info_line = False

            if customer_name is None:
                value = self._value_after(line, self._name_patterns)
                if value:
                    customer_name = value
                    is_info_line = True

            if customer_phone is None:
                value = self._value_after(line, self._phone_patterns)
                if value:
                    raw_phone = value
                    customer_phone = sanitize_phone(value)
                    is_info_line = True

            if not is_info_line:
                remaining_lines.append(line)

        return CustomerInfo(
            customer_name=customer_name,
            customer_phone=customer_phone,
            raw_phone=raw_phone,
            remaining_text="\n".join(remaining_lines),
        )

    def _compound_spans(self, text: str) -> List[Tuple[int, int]]:
        spans = []
        for phrase in self.vocabulary.compound_phrases:
            for match in re.finditer(re.escape(phrase), text, re.IGNORECASE):
                spans.append((match.start(), len(phrase)))
        return spans

    def _accepts(
        self, text: str, match: re.Match, compound_spans: List[Tuple[int, int]]
    ) -> bool:
        index = match.start()
        if not text[:index].strip():
            return False

        for phrase_index, phrase_length in compound_spans:
            if abs(index - phrase_index) < phrase_length + COMPOUND_PHRASE_MARGIN:
                return False

        # "want to order ..." is not an address
        next_word = _NEXT_WORD_RE.match(text, match.end())
        if next_word and next_word.group(1).lower() in self._order_verbs:
            return False
        return True

    def extract_address(self, text: str) -> AddressSplit:
        """
        Split a message into the order portion and the address portion.

        Indicators are tried in vocabulary order; the first accepted
        occurrence starts the address, indicator included.
        """
        if not text:
            return AddressSplit("", None)

        compound_spans = self._compound_spans(text)

        for pattern in self._address_patterns:
            for match in pattern.finditer(text):
                if self._accepts(text, match, compound_spans):
                    index = match.start()
                    return AddressSplit(text[:index].strip(), text[index:].strip())

        return AddressSplit(text, None)
