# services/search_vocabulary.py
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Tuple

STOPWORDS = frozenset({
    "in", "at", "the", "a", "an", "and", "or", "of", "to", "for",
    "on", "is", "are", "was", "were", "be", "been",
})

PURPOSE_KEYWORDS = {
    "buy": "buy",
    "purchase": "buy",
    "rent": "rent",
    "sell": "sell",
    "sale": "sell",
    "lease": "lease",
}

PROPERTY_TYPES = {
    "flat": "flat",
    "apartment": "apartment",
    "apt": "apartment",
    "house": "house",
    "villa": "villa",
    "office": "office",
    "shop": "shop",
    "commercial": "commercial",
    "land": "land",
    "plot": "plot",
    "bungalow": "villa",
    "farmhouse": "villa",
}

# Checked in order: "unfurnished" contains "furnished"
FURNISHING_KEYWORDS = (
    ("unfurnished", "unfurnished"),
    ("semi", "semi"),
    ("furnished", "furnished"),
)

CITIES = (
    "indore", "mumbai", "delhi", "bangalore", "pune", "hyderabad", "gurgaon",
    "noida", "kolkata", "jaipur", "ahmedabad", "chandigarh", "lucknow",
    "bhopal", "nagpur",
)

CITY_ALIASES = {
    "colkata": "kolkata",
    "calcutta": "kolkata",
    "bengaluru": "bangalore",
    "bombay": "mumbai",
    "gurugram": "gurgaon",
}

LAKH = 100_000
CRORE = 10_000_000

PRICE_MAGNITUDES = {
    "lakh": LAKH,
    "lakhs": LAKH,
    "lac": LAKH,
    "lacs": LAKH,
    "l": LAKH,
    "crore": CRORE,
    "crores": CRORE,
    "cr": CRORE,
}

# "under 50 lakh": the magnitude already implies an upper bound
PRICE_CUES = frozenset({"under", "below", "upto", "within", "max", "budget"})

FALLBACK_FIELDS = ("title", "description", "location", "furnished", "purpose", "category", "parking")


@dataclass(frozen=True)
class SearchVocabulary:
    """Keyword tables driving free-text classification."""
    stopwords: FrozenSet[str] = STOPWORDS
    purposes: Dict[str, str] = field(default_factory=lambda: dict(PURPOSE_KEYWORDS))
    property_types: Dict[str, str] = field(default_factory=lambda: dict(PROPERTY_TYPES))
    furnishing: Tuple[Tuple[str, str], ...] = FURNISHING_KEYWORDS
    cities: Tuple[str, ...] = CITIES
    city_aliases: Dict[str, str] = field(default_factory=lambda: dict(CITY_ALIASES))
    price_magnitudes: Dict[str, int] = field(default_factory=lambda: dict(PRICE_MAGNITUDES))
    price_cues: FrozenSet[str] = PRICE_CUES
    fallback_fields: Tuple[str, ...] = FALLBACK_FIELDS
    min_fallback_length: int = 3
    max_bhk: int = 8
    fuzzy_city_min_length: int = 5
    fuzzy_city_cutoff: float = 90


DEFAULT_VOCABULARY = SearchVocabulary()
