from sqlalchemy import (
    Column, Integer, String, Text, Float,
    Boolean, DateTime, JSON, Index
)
from sqlalchemy.dialects.postgresql import JSONB
from db.database import Base
from datetime import datetime
import enum


# JSONB on PostgreSQL, plain JSON everywhere else (tests run on SQLite)
JSONList = JSON().with_variant(JSONB, "postgresql")


class ProductType(str, enum.Enum):
    STATIONERY = "stationery"
    MACHINERY = "machinery"
    PROPERTY = "property"


class Purpose(str, enum.Enum):
    SELL = "sell"
    RENT = "rent"


COMMON_FIELDS = (
    "id", "title", "description", "slug", "keywords", "price", "discount_price",
    "images", "ratings", "reviews_count", "featured", "type", "created_at", "updated_at",
)

# Which optional attributes mean something for each variant
VARIANT_FIELDS = {
    ProductType.STATIONERY.value: (
        "stock", "sku", "brand", "category", "material", "weight", "color", "size", "dimensions",
    ),
    ProductType.MACHINERY.value: (
        "stock", "sku", "brand", "category", "power", "voltage", "warranty", "dimensions", "weight",
    ),
    ProductType.PROPERTY.value: (
        "bhk", "area", "location", "furnished", "ownership", "purpose", "parking",
        "owner_contact", "price_negotiable", "video", "category",
    ),
}

ALL_VARIANT_FIELDS = sorted({name for names in VARIANT_FIELDS.values() for name in names})


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    slug = Column(String(280), unique=True, nullable=True, index=True)
    keywords = Column(JSONList, default=list)  # Example: ["pen", "gel"]

    # Pricing
    price = Column(Float, nullable=False)
    discount_price = Column(Float, nullable=True)
    price_negotiable = Column(Boolean, nullable=True)

    # Inventory
    stock = Column(Integer, nullable=True)
    sku = Column(String(120), nullable=True)

    # Product details
    size = Column(String(120), nullable=True)
    material = Column(String(120), nullable=True)
    weight = Column(String(120), nullable=True)
    color = Column(String(120), nullable=True)
    brand = Column(String(120), nullable=True)
    category = Column(String(120), nullable=True, index=True)
    dimensions = Column(String(120), nullable=True)
    warranty = Column(String(120), nullable=True)
    power = Column(String(120), nullable=True)
    voltage = Column(String(120), nullable=True)

    # Property details
    bhk = Column(Integer, nullable=True)
    area = Column(String(120), nullable=True)
    parking = Column(String(120), nullable=True)
    furnished = Column(String(120), nullable=True)
    ownership = Column(String(120), nullable=True)
    location = Column(String(255), nullable=True)
    owner_contact = Column(String(120), nullable=True)
    purpose = Column(String(20), nullable=True)
    video = Column(Text, nullable=True)

    # Set once on creation, never updated
    type = Column(String(20), nullable=False, index=True)

    # Media: ["https://cdn.example.com/products/a.jpg", ...]
    images = Column(JSONList, default=list)

    ratings = Column(Float, default=0.0)
    reviews_count = Column(Integer, default=0)
    featured = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_product_price", "price"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, type={self.type}, title={self.title})>"
