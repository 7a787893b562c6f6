# schemas/blog.py
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Literal
from datetime import datetime

from functions.normalize import normalize_str_list

Language = Literal["en", "hi"]
BlogStatus = Literal["draft", "published"]

SLUG_PATTERN = r"^[a-z0-9-]*$"


class BlogCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=200)
    slug: Optional[str] = Field(None, pattern=SLUG_PATTERN)
    excerpt: str = Field("", max_length=300)
    content: str = Field(..., min_length=20)
    featured_image: str = ""
    category: str = ""
    tags: List[str] = []
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    language: Language = "en"
    status: BlogStatus = "published"
    author: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("slug", mode="before")
    @classmethod
    def _lower_slug(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value):
        return normalize_str_list(value)


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=5, max_length=200)
    slug: Optional[str] = Field(None, pattern=SLUG_PATTERN)
    excerpt: Optional[str] = Field(None, max_length=300)
    content: Optional[str] = Field(None, min_length=20)
    featured_image: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    language: Optional[Language] = None
    status: Optional[BlogStatus] = None
    author: Optional[str] = None

    @field_validator("slug", mode="before")
    @classmethod
    def _lower_slug(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value):
        return None if value is None else normalize_str_list(value)


class BlogSummary(BaseModel):
    id: int
    title: str
    slug: str
    excerpt: Optional[str] = ""
    featured_image: Optional[str] = ""
    category: Optional[str] = ""
    tags: List[str] = []
    language: str
    status: str
    author: Optional[str] = None
    views: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BlogResponse(BlogSummary):
    content: str
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    updated_at: Optional[datetime] = None


class BlogPage(BaseModel):
    success: bool = True
    total: int
    page: int
    totalPages: int
    data: List[BlogSummary]
