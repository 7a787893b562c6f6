# routes/blog.py
from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import Optional
import logging
import time

from db.VerifyToken import admin_dependency
from db.connection import db_dependency
from functions.normalize import generate_slug
from functions.settings import get_settings
from models.blog import Blog
from schemas.blog import BlogCreate, BlogUpdate, BlogResponse, BlogSummary, BlogPage
from services.search_service import resolve_pagination, total_pages

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blogs", tags=["Blogs"])


def _available_slug(db: Session, slug: str, exclude_id: Optional[int] = None) -> str:
    """Keep the slug unless another post owns it; then append a timestamp."""
    query = db.query(Blog.id).filter(Blog.slug == slug)
    if exclude_id is not None:
        query = query.filter(Blog.id != exclude_id)
    if query.first():
        return f"{slug}-{int(time.time() * 1000)}"
    return slug


def _get_blog_or_404(db: Session, blog_id: int) -> Blog:
    blog = db.query(Blog).filter(Blog.id == blog_id).first()
    if not blog:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog not found")
    return blog


# ---------------- CREATE ----------------
@router.post("/", status_code=status.HTTP_201_CREATED)
def create_blog(payload: BlogCreate, db: db_dependency, admin: admin_dependency):
    slug = payload.slug or generate_slug(payload.title) or "post"

    data = payload.model_dump(exclude={"slug", "author"})
    data["meta_title"] = payload.meta_title or payload.title[:60]
    data["meta_description"] = payload.meta_description or payload.excerpt[:160]

    blog = Blog(slug=_available_slug(db, slug), **data)
    if payload.author:
        blog.author = payload.author

    db.add(blog)
    db.commit()
    db.refresh(blog)
    logger.info(f"Blog {blog.id} '{blog.slug}' created by admin {admin['user_id']}")

    return {
        "success": True,
        "message": "Blog created successfully",
        "data": BlogResponse.model_validate(blog),
    }


# ---------------- READ ----------------
@router.get("/", response_model=BlogPage)
def get_blogs(
    db: db_dependency,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches title or excerpt"),
    language: str = Query("en"),
):
    pagination = resolve_pagination(
        page, limit, default_limit=10, max_limit=get_settings().search_max_limit
    )

    query = db.query(Blog).filter(Blog.status == "published", Blog.language == language)
    if category:
        query = query.filter(Blog.category == category)
    if search and search.strip():
        term = search.strip()
        query = query.filter(or_(
            Blog.title.icontains(term, autoescape=True),
            Blog.excerpt.icontains(term, autoescape=True),
        ))

    total = query.count()
    blogs = (
        query.order_by(Blog.created_at.desc(), Blog.id.desc())
        .offset(pagination.skip)
        .limit(pagination.limit)
        .all()
    )

    return {
        "success": True,
        "total": total,
        "page": pagination.page,
        "totalPages": total_pages(total, pagination.limit),
        "data": [BlogSummary.model_validate(blog) for blog in blogs],
    }


@router.get("/{slug}")
def get_blog_by_slug(slug: str, db: db_dependency):
    blog = db.query(Blog).filter(Blog.slug == slug, Blog.status == "published").first()
    if not blog:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog not found")

    blog.views = (blog.views or 0) + 1
    db.commit()
    db.refresh(blog)

    return {"success": True, "data": BlogResponse.model_validate(blog)}


# ---------------- UPDATE ----------------
@router.put("/{blog_id}")
def update_blog(blog_id: int, payload: BlogUpdate, db: db_dependency, admin: admin_dependency):
    blog = _get_blog_or_404(db, blog_id)

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("title") and not updates.get("slug"):
        updates["slug"] = generate_slug(updates["title"]) or blog.slug
    if updates.get("slug"):
        updates["slug"] = _available_slug(db, updates["slug"], exclude_id=blog.id)
    else:
        updates.pop("slug", None)

    for field, value in updates.items():
        setattr(blog, field, value)

    db.commit()
    db.refresh(blog)
    logger.info(f"Blog {blog.id} updated by admin {admin['user_id']}: {sorted(updates)}")

    return {
        "success": True,
        "message": "Blog updated successfully",
        "data": BlogResponse.model_validate(blog),
    }


# ---------------- DELETE ----------------
@router.delete("/{blog_id}")
def delete_blog(blog_id: int, db: db_dependency, admin: admin_dependency):
    blog = _get_blog_or_404(db, blog_id)
    db.delete(blog)
    db.commit()
    logger.info(f"Blog {blog_id} deleted by admin {admin['user_id']}")
    return {"success": True, "message": "Blog deleted successfully"}
