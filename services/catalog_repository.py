# services/catalog_repository.py
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from typing import List
import logging

from models.Products import Product
from services.filter_spec import FilterSpec, Exact, Range, Contains, OneOf

logger = logging.getLogger(__name__)

SEARCHABLE_COLUMNS = {
    "title", "description", "slug", "price", "stock", "brand", "category", "material",
    "weight", "color", "size", "power", "voltage", "warranty", "bhk", "area", "location",
    "furnished", "ownership", "purpose", "parking", "type", "featured", "created_at",
}


def _column(name: str):
    if name not in SEARCHABLE_COLUMNS:
        raise ValueError(f"Field '{name}' cannot be filtered on")
    return getattr(Product, name)


def compile_condition(name: str, condition):
    column = _column(name)
    if isinstance(condition, Exact):
        return column == condition.value
    if isinstance(condition, Range):
        bounds = []
        if condition.min is not None:
            bounds.append(column >= condition.min)
        if condition.max is not None:
            bounds.append(column <= condition.max)
        return and_(*bounds) if bounds else None
    if isinstance(condition, Contains):
        return column.icontains(condition.pattern, autoescape=True)
    if isinstance(condition, OneOf):
        return column.in_(list(condition.values))
    raise TypeError(f"Unsupported condition {condition!r}")


def compile_filter(spec: FilterSpec) -> list:
    """Turn a FilterSpec into a list of SQLAlchemy clauses to AND together."""
    filters = []
    for name, condition in spec.fields.items():
        clause = compile_condition(name, condition)
        if clause is not None:
            filters.append(clause)

    for group in spec.any_of:
        filters.append(or_(*(compile_condition(name, cond) for name, cond in group)))
    return filters


class CatalogRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self, spec: FilterSpec):
        query = self.db.query(Product)
        filters = compile_filter(spec)
        if filters:
            query = query.filter(and_(*filters))
        return query

    def find_matching(self, spec: FilterSpec, sort_key, skip: int, limit: int) -> List[Product]:
        sort_column = _column(sort_key.field)
        order = sort_column.desc() if sort_key.descending else sort_column.asc()
        # id as tie-breaker keeps pages stable between identical requests
        tie_breaker = Product.id.desc() if sort_key.descending else Product.id.asc()
        return (
            self._query(spec)
            .order_by(order, tie_breaker)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_matching(self, spec: FilterSpec) -> int:
        return self._query(spec).count()
