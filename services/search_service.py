# services/search_service.py
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence
import logging
import math
import time

from services.filter_spec import FilterSpec, Exact, Range, Contains
from services.query_understanding import QueryUnderstandingService, ParsedQuery, parse_number
from services.search_vocabulary import FALLBACK_FIELDS

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 8
MAX_PAGE_LIMIT = 50

# Explicit parameters matched by substring vs. by equality
SUBSTRING_PARAMS = ("location", "area", "furnished", "ownership", "category", "brand")


@dataclass
class SearchParams:
    """Raw query-string values; nothing here has been validated yet."""
    q: Optional[str] = None
    type: Optional[str] = None
    purpose: Optional[str] = None
    location: Optional[str] = None
    area: Optional[str] = None
    furnished: Optional[str] = None
    ownership: Optional[str] = None
    bhk: Optional[str] = None
    min_price: Optional[str] = None
    max_price: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    sort: Optional[str] = None
    page: Optional[str] = None
    limit: Optional[str] = None


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool


PRICE_LOW = SortKey("price", False)
PRICE_HIGH = SortKey("price", True)
NEWEST = SortKey("created_at", True)


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _positive_int(value: Optional[Any]) -> Optional[int]:
    """Whole numbers >= 1 only; anything else is treated as missing."""
    value = _clean(value)
    if value is None:
        return None
    try:
        number = int(value)
    except (ValueError, TypeError):
        return None
    return number if number >= 1 else None


def resolve_sort(sort: Optional[str]) -> SortKey:
    sort = (_clean(sort) or "").lower()
    if sort == "price_low":
        return PRICE_LOW
    if sort == "price_high":
        return PRICE_HIGH
    return NEWEST


def resolve_pagination(page: Optional[Any], limit: Optional[Any],
                       default_limit: int = DEFAULT_PAGE_LIMIT,
                       max_limit: int = MAX_PAGE_LIMIT) -> Pagination:
    """
    Coerce raw page/limit values. Malformed, zero or negative values fall back
    to page 1 and the listing's default limit; limit is clamped to max_limit.
    """
    page_number = _positive_int(page) or 1
    limit_number = _positive_int(limit) or default_limit
    return Pagination(page=page_number, limit=min(limit_number, max_limit))


def merge_filters(params: SearchParams, parsed: Optional[ParsedQuery] = None,
                  base: Optional[Dict[str, Any]] = None,
                  fallback_fields: Sequence[str] = FALLBACK_FIELDS) -> FilterSpec:
    """
    Combine explicit parameters with what the free-text classifier inferred.

    Precedence: ``base`` (fixed by the route) > explicit parameter > inferred.
    The inferred "under X lakh" bound only applies when no explicit price
    bound was supplied. Free-text OR-groups are always kept.
    """
    spec = FilterSpec()

    for name, value in (base or {}).items():
        spec.set(name, Exact(value))

    # explicit exact-match params
    type_value = _clean(params.type)
    if type_value:
        spec.set_default("type", Exact(type_value.lower()))
    purpose = _clean(params.purpose)
    if purpose:
        spec.set_default("purpose", Exact(purpose.lower()))
    bhk = _positive_int(params.bhk)
    if bhk is not None:
        spec.set_default("bhk", Exact(bhk))

    # explicit substring params
    for name in SUBSTRING_PARAMS:
        value = _clean(getattr(params, name))
        if value:
            spec.set_default(name, Contains(value))

    # explicit price range, only the bounds that parse
    min_price = parse_number(_clean(params.min_price) or "")
    max_price = parse_number(_clean(params.max_price) or "")
    if min_price is not None or max_price is not None:
        spec.set_default("price", Range(min=min_price, max=max_price))

    if parsed is None:
        return spec

    # inferred values fill only what is still unset
    if parsed.bhk is not None:
        spec.set_default("bhk", Exact(parsed.bhk))
    if parsed.purpose:
        spec.set_default("purpose", Exact(parsed.purpose))
    if parsed.property_type_inferred:
        spec.set_default("type", Exact("property"))
    if parsed.furnished:
        spec.set_default("furnished", Contains(parsed.furnished))
    if parsed.location:
        spec.set_default("location", Contains(parsed.location))
    if parsed.max_price is not None:
        spec.set_default("price", Range(max=parsed.max_price))

    if parsed.title_terms:
        spec.add_group(tuple(("title", Contains(term)) for term in parsed.title_terms))

    for word in parsed.free_text:
        spec.add_group(tuple((name, Contains(word)) for name in fallback_fields))

    return spec


def build_filter(params: SearchParams,
                 understanding: Optional[QueryUnderstandingService] = None,
                 base: Optional[Dict[str, Any]] = None) -> FilterSpec:
    understanding = understanding or QueryUnderstandingService()
    parsed = understanding.classify(params.q) if _clean(params.q) else None
    return merge_filters(params, parsed, base=base,
                         fallback_fields=understanding.vocabulary.fallback_fields)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def search_catalog(repository, spec: FilterSpec, sort: SortKey, pagination: Pagination,
                   serializer=None) -> Dict[str, Any]:
    """
    Run the page lookup and the count lookup against the same filter and
    build the response envelope. Storage errors propagate to the caller.
    """
    start_time = time.time()

    entries = repository.find_matching(spec, sort, pagination.skip, pagination.limit)
    total = repository.count_matching(spec)

    processing_time = (time.time() - start_time) * 1000
    logger.info(
        f"Catalog search: {total} matches, page {pagination.page} "
        f"({len(entries)} shown) in {processing_time:.1f}ms filters={spec.as_dict()}"
    )

    data = [serializer(entry) for entry in entries] if serializer else list(entries)
    return {
        "success": True,
        "page": pagination.page,
        "totalPages": total_pages(total, pagination.limit),
        "totalProducts": total,
        "data": data,
    }
