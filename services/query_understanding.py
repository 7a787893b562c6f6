from dataclasses import dataclass, field
from typing import List, Optional
from rapidfuzz import process, fuzz
import math
import re
import string

from services.search_vocabulary import SearchVocabulary, DEFAULT_VOCABULARY

BHK_PATTERN = re.compile(r"^(\d+)\s*bhk$", re.IGNORECASE)
NUMBER_PATTERN = re.compile(r"^\d+(?:\.\d+)?$")
FUSED_PRICE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)([a-z]+)$")


@dataclass
class ParsedQuery:
    """What the free-text box said, before explicit parameters are applied."""
    original: str = ""
    tokens: List[str] = field(default_factory=list)
    bhk: Optional[int] = None
    purpose: Optional[str] = None
    property_type_inferred: bool = False
    title_terms: List[str] = field(default_factory=list)
    furnished: Optional[str] = None
    location: Optional[str] = None
    max_price: Optional[float] = None
    free_text: List[str] = field(default_factory=list)


def parse_number(value: str) -> Optional[float]:
    """Parse a plain decimal token, ``None`` when it is not a usable number."""
    if not value or not NUMBER_PATTERN.match(value):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _as_amount(value: float):
    return int(value) if float(value).is_integer() else value


class QueryUnderstandingService:
    def __init__(self, vocabulary: SearchVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def tokenize(self, query: Optional[str]) -> List[str]:
        """
        Lowercase, split on whitespace, trim punctuation and drop stopwords.
        "2 bhk" typed with a space is glued back into a single "2bhk" token.
        """
        if not query:
            return []

        words = []
        for raw in query.lower().split():
            word = raw.strip(string.punctuation)
            if word and word not in self.vocabulary.stopwords:
                words.append(word)

        tokens: List[str] = []
        for word in words:
            if word == "bhk" and tokens and tokens[-1].isdigit():
                tokens[-1] = f"{tokens[-1]}bhk"
            else:
                tokens.append(word)
        return tokens

    def match_city(self, word: str) -> Optional[str]:
        """
        Resolve a token to a gazetteer city. Longer tokens get a fuzzy pass
        so "bangalor" or "kolkatta" still land on the right city.
        """
        vocab = self.vocabulary
        if word in vocab.cities:
            return word
        if word in vocab.city_aliases:
            return vocab.city_aliases[word]
        if len(word) < vocab.fuzzy_city_min_length:
            return None
        best_match = process.extractOne(
            word, vocab.cities, scorer=fuzz.ratio, score_cutoff=vocab.fuzzy_city_cutoff
        )
        return best_match[0] if best_match else None

    def match_furnishing(self, word: str) -> Optional[str]:
        for keyword, canonical in self.vocabulary.furnishing:
            if keyword in word:
                return canonical
        return None

    def fused_price(self, word: str) -> Optional[float]:
        """'50lakh', '1.5cr' and friends."""
        match = FUSED_PRICE_PATTERN.match(word)
        if not match:
            return None
        multiplier = self.vocabulary.price_magnitudes.get(match.group(2))
        number = parse_number(match.group(1))
        if multiplier is None or number is None:
            return None
        return _as_amount(number * multiplier)

    def classify(self, query: Optional[str]) -> ParsedQuery:
        vocab = self.vocabulary
        tokens = self.tokenize(query)
        parsed = ParsedQuery(original=query or "", tokens=tokens)

        skip_next = False
        for i, word in enumerate(tokens):
            if skip_next:
                skip_next = False
                continue
            following = tokens[i + 1] if i + 1 < len(tokens) else None

            bhk_match = BHK_PATTERN.match(word)
            if bhk_match:
                bhk = parse_number(bhk_match.group(1))
                if bhk is not None and 1 <= bhk <= vocab.max_bhk:
                    if parsed.bhk is None:
                        parsed.bhk = int(bhk)
                else:
                    self._add_free_text(parsed, word)
                continue

            if word in vocab.purposes:
                if parsed.purpose is None:
                    parsed.purpose = vocab.purposes[word]
                continue

            if word in vocab.property_types:
                parsed.property_type_inferred = True
                canonical = vocab.property_types[word]
                if canonical not in parsed.title_terms:
                    parsed.title_terms.append(canonical)
                continue

            furnishing = self.match_furnishing(word)
            if furnishing:
                if parsed.furnished is None:
                    parsed.furnished = furnishing
                continue

            city = self.match_city(word)
            if city:
                if parsed.location is None:
                    parsed.location = city
                continue

            if word in vocab.price_cues:
                continue

            number = parse_number(word)
            if number is not None and following in vocab.price_magnitudes:
                if parsed.max_price is None:
                    parsed.max_price = _as_amount(number * vocab.price_magnitudes[following])
                skip_next = True
                continue

            fused = self.fused_price(word)
            if fused is not None:
                if parsed.max_price is None:
                    parsed.max_price = fused
                continue

            self._add_free_text(parsed, word)

        return parsed

    def _add_free_text(self, parsed: ParsedQuery, word: str) -> None:
        if len(word) >= self.vocabulary.min_fallback_length and word not in parsed.free_text:
            parsed.free_text.append(word)
