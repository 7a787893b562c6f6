# routes/search.py
from fastapi import APIRouter, HTTPException, Query, status
from typing import Optional
import logging

from db.connection import db_dependency
from functions.productsMana import serialize_product
from functions.settings import get_settings
from models.Products import ProductType
from schemas.productManagement.search import CatalogPage, PropertySearchPage, SortOption
from services.catalog_repository import CatalogRepository
from services.filter_spec import Contains
from services.search_service import (
    SearchParams, build_filter, merge_filters, resolve_pagination, resolve_sort, search_catalog
)

router = APIRouter(prefix="/api/products", tags=["search"])
logger = logging.getLogger(__name__)

SORT_HELP = "Sort order: " + ", ".join(option.value for option in SortOption)
STATIONERY_FIELDS = ("title", "description", "category", "brand")


def _run_search(db, spec, params: SearchParams, default_limit: int) -> dict:
    pagination = resolve_pagination(
        params.page, params.limit,
        default_limit=default_limit,
        max_limit=get_settings().search_max_limit,
    )
    result = search_catalog(
        CatalogRepository(db), spec, resolve_sort(params.sort), pagination,
        serializer=serialize_product,
    )
    return result


@router.get("/public", response_model=CatalogPage)
def smart_search(
    db: db_dependency,
    q: Optional[str] = Query(None, description="Free text, e.g. '2bhk flat indore under 50 lakh rent'"),
    type: Optional[str] = Query(None, description="stationery, machinery or property"),
    purpose: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    furnished: Optional[str] = Query(None),
    ownership: Optional[str] = Query(None),
    bhk: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    category: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, description=SORT_HELP),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
):
    """
    Universal smart search. Free text is classified into bhk, purpose, property
    type, furnishing, city and price hints; explicit parameters win over hints.
    """
    params = SearchParams(
        q=q, type=type, purpose=purpose, location=location, furnished=furnished,
        ownership=ownership, bhk=bhk, min_price=min_price, max_price=max_price,
        category=category, brand=brand, sort=sort, page=page, limit=limit,
    )
    logger.info(f"Smart search: q='{q}' type={type} purpose={purpose} sort={sort}")
    try:
        result = _run_search(db, build_filter(params), params, default_limit=8)
    except Exception as e:
        logger.error(f"Smart search error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Search failed"
        )
    return result


@router.get("/properties", response_model=PropertySearchPage)
def search_properties(
    db: db_dependency,
    q: Optional[str] = Query(None),
    purpose: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    area: Optional[str] = Query(None, description="Locality, matched as a substring"),
    furnished: Optional[str] = Query(None),
    ownership: Optional[str] = Query(None),
    bhk: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    category: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, description=SORT_HELP),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
):
    """Property-only natural language search; echoes the filters it applied."""
    params = SearchParams(
        q=q, purpose=purpose, location=location, area=area, furnished=furnished, ownership=ownership,
        bhk=bhk, min_price=min_price, max_price=max_price, category=category,
        sort=sort, page=page, limit=limit,
    )
    try:
        spec = build_filter(params, base={"type": ProductType.PROPERTY.value})
        result = _run_search(db, spec, params, default_limit=8)
    except Exception as e:
        logger.error(f"Property search error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch properties"
        )
    result["query"] = q or ""
    result["appliedFilters"] = spec.as_dict()
    return result


@router.get("/stationery", response_model=CatalogPage)
def get_stationery_products(
    db: db_dependency,
    q: Optional[str] = Query(None, description="Every word must match title, description, category or brand"),
    category: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    sort: Optional[str] = Query(None, description=SORT_HELP),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
):
    params = SearchParams(
        category=category, brand=brand, min_price=min_price, max_price=max_price,
        sort=sort, page=page, limit=limit,
    )
    spec = merge_filters(params, base={"type": ProductType.STATIONERY.value})
    for word in (q or "").lower().split():
        spec.add_group(tuple((name, Contains(word)) for name in STATIONERY_FIELDS))

    try:
        result = _run_search(db, spec, params, default_limit=12)
    except Exception as e:
        logger.error(f"Stationery Error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch stationery products"
        )
    return result
