# schemas/productManagement/search.py
from pydantic import BaseModel
from typing import List, Dict, Any
from enum import Enum


class SortOption(str, Enum):
    NEWEST = "newest"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"


class CatalogPage(BaseModel):
    success: bool = True
    page: int
    totalPages: int
    totalProducts: int
    data: List[Dict[str, Any]]


class PropertySearchPage(CatalogPage):
    query: str
    appliedFilters: Dict[str, Any]
