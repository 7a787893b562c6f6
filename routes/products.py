# routes/products.py
from fastapi import APIRouter, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from db.VerifyToken import admin_dependency
from db.connection import db_dependency
from functions.normalize import generate_slug
from functions.productsMana import serialize_product, strip_inapplicable
from functions.settings import get_settings
from models.Products import Product, ProductType
from schemas.productManagement.Products import ProductCreate, ProductUpdate
from schemas.productManagement.search import CatalogPage
from services.catalog_repository import CatalogRepository
from services.search_service import (
    SearchParams, merge_filters, resolve_pagination, search_catalog, NEWEST
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

ALLOWED_TYPES = [product_type.value for product_type in ProductType]


# ---------------- HELPERS ----------------
def unique_slug(db: Session, title: str) -> str:
    """Slug from the title, suffixed -1, -2, ... until nothing else uses it."""
    base_slug = generate_slug(title) or "product"
    candidate = base_slug
    counter = 1
    while True:
        if not db.query(Product.id).filter(Product.slug == candidate).first():
            return candidate
        candidate = f"{base_slug}-{counter}"
        counter += 1


def get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


def _list_page(db: Session, params: SearchParams, default_limit: int, base=None) -> dict:
    pagination = resolve_pagination(
        params.page, params.limit,
        default_limit=default_limit,
        max_limit=get_settings().search_max_limit,
    )
    spec = merge_filters(params, base=base)
    return search_catalog(CatalogRepository(db), spec, NEWEST, pagination, serializer=serialize_product)


# ---------------- READ ----------------
@router.get("/", response_model=CatalogPage)
def get_all_products(
    db: db_dependency,
    type: Optional[str] = Query(None),
    purpose: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
):
    params = SearchParams(
        type=type, purpose=purpose, location=location,
        min_price=min_price, max_price=max_price, page=page, limit=limit,
    )
    try:
        return _list_page(db, params, default_limit=10)
    except Exception as e:
        logger.error(f"Error retrieving products: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving products"
        )


@router.get("/type/{product_type}", response_model=CatalogPage)
def get_products_by_type(
    product_type: str,
    db: db_dependency,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
):
    if product_type not in ALLOWED_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid product type")

    params = SearchParams(page=page, limit=limit)
    try:
        return _list_page(db, params, default_limit=8, base={"type": product_type})
    except Exception as e:
        logger.error(f"Error retrieving {product_type} products: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch products"
        )


@router.get("/slug/{slug}")
def get_product_by_slug(slug: str, db: db_dependency):
    product = db.query(Product).filter(Product.slug == slug).first()
    # fall back to the numeric id for links built before slugs existed
    if not product and slug.isdigit():
        product = db.query(Product).filter(Product.id == int(slug)).first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return {"success": True, "data": serialize_product(product)}


@router.get("/{product_id}")
def get_single_product(product_id: int, db: db_dependency):
    product = get_product_or_404(db, product_id)
    return {"success": True, "data": serialize_product(product)}


# ---------------- WRITE ----------------
@router.post("/", status_code=status.HTTP_201_CREATED)
def add_product(payload: ProductCreate, db: db_dependency, admin: admin_dependency):
    """Create a catalog entry. Attributes of other variants are discarded."""
    product_type = payload.type.value
    data = strip_inapplicable(product_type, payload.model_dump(mode="json", exclude={"type", "slug"}))

    product = Product(type=product_type, **data)
    if payload.slug:
        product.slug = unique_slug(db, payload.slug)
    elif product_type == ProductType.STATIONERY.value:
        product.slug = unique_slug(db, payload.title)

    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info(f"Product created with ID: {product.id} by admin {admin['user_id']}")

    return {
        "success": True,
        "message": "Product added successfully",
        "data": serialize_product(product),
    }


@router.put("/{product_id}")
def update_product(product_id: int, payload: ProductUpdate, db: db_dependency, admin: admin_dependency):
    product = get_product_or_404(db, product_id)

    if payload.type is not None and payload.type.lower().strip() != product.type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product type cannot be changed"
        )

    updates = payload.model_dump(mode="json", exclude_unset=True, exclude={"type"})
    updates = strip_inapplicable(product.type, updates)
    if product.type == ProductType.PROPERTY.value and "purpose" in updates and updates["purpose"] is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="purpose is required for property listings")

    for field, value in updates.items():
        setattr(product, field, value)

    db.commit()
    db.refresh(product)
    logger.info(f"Product {product.id} updated by admin {admin['user_id']}: {sorted(updates)}")

    return {
        "success": True,
        "message": "Product updated successfully",
        "data": serialize_product(product),
    }


@router.delete("/{product_id}")
def delete_product(product_id: int, db: db_dependency, admin: admin_dependency):
    product = get_product_or_404(db, product_id)
    db.delete(product)
    db.commit()
    logger.info(f"Product {product_id} deleted by admin {admin['user_id']}")
    return {"success": True, "message": "Product deleted successfully"}
