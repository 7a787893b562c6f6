# schemas/productManagement/Products.py
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List

from functions.normalize import normalize_str_list, normalize_bool
from models.Products import ProductType, Purpose


class ProductBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    keywords: List[str] = []
    images: List[str] = []

    # stationery / machinery
    stock: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = None
    size: Optional[str] = None
    material: Optional[str] = None
    weight: Optional[str] = None
    color: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    dimensions: Optional[str] = None
    warranty: Optional[str] = None
    power: Optional[str] = None
    voltage: Optional[str] = None

    # property
    bhk: Optional[int] = Field(None, ge=1, le=8)
    area: Optional[str] = None
    parking: Optional[str] = None
    furnished: Optional[str] = None
    ownership: Optional[str] = None
    location: Optional[str] = None
    owner_contact: Optional[str] = None
    purpose: Optional[Purpose] = None
    price_negotiable: Optional[bool] = None
    video: Optional[str] = None

    featured: bool = False

    @field_validator("keywords", "images", mode="before")
    @classmethod
    def _list_fields(cls, value):
        return normalize_str_list(value)

    @field_validator("price_negotiable", mode="before")
    @classmethod
    def _negotiable(cls, value):
        return normalize_bool(value)

    @field_validator("featured", mode="before")
    @classmethod
    def _featured(cls, value):
        return bool(normalize_bool(value))

    @field_validator("purpose", mode="before")
    @classmethod
    def _lower_purpose(cls, value):
        return value.lower().strip() if isinstance(value, str) else value


class ProductCreate(ProductBase):
    type: ProductType
    slug: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _lower_type(cls, value):
        return value.lower().strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _variant_requirements(self):
        if self.type == ProductType.PROPERTY:
            if self.purpose is None:
                raise ValueError("purpose is required for property listings")
            if self.bhk is None:
                raise ValueError("bhk is required for property listings")
        elif self.stock is None:
            raise ValueError(f"stock is required for {self.type.value} products")
        return self


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    keywords: Optional[List[str]] = None
    images: Optional[List[str]] = None
    stock: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = None
    size: Optional[str] = None
    material: Optional[str] = None
    weight: Optional[str] = None
    color: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    dimensions: Optional[str] = None
    warranty: Optional[str] = None
    power: Optional[str] = None
    voltage: Optional[str] = None
    bhk: Optional[int] = Field(None, ge=1, le=8)
    area: Optional[str] = None
    parking: Optional[str] = None
    furnished: Optional[str] = None
    ownership: Optional[str] = None
    location: Optional[str] = None
    owner_contact: Optional[str] = None
    purpose: Optional[Purpose] = None
    price_negotiable: Optional[bool] = None
    video: Optional[str] = None
    featured: Optional[bool] = None

    # accepted only so a changed value can be rejected explicitly
    type: Optional[str] = None

    @field_validator("keywords", "images", mode="before")
    @classmethod
    def _list_fields(cls, value):
        return None if value is None else normalize_str_list(value)

    @field_validator("price_negotiable", "featured", mode="before")
    @classmethod
    def _bool_fields(cls, value):
        return normalize_bool(value)

    @field_validator("purpose", mode="before")
    @classmethod
    def _lower_purpose(cls, value):
        return value.lower().strip() if isinstance(value, str) else value
