# models/blog.py
from sqlalchemy import Column, String, Integer, Text, DateTime, Index
from db.database import Base
from models.Products import JSONList
from datetime import datetime


class Blog(Base):
    __tablename__ = "blogs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(260), unique=True, nullable=False, index=True)
    excerpt = Column(String(300), default="")
    content = Column(Text, nullable=False)
    featured_image = Column(Text, default="")

    category = Column(String(120), default="", index=True)
    tags = Column(JSONList, default=list)

    # SEO
    meta_title = Column(String(60), nullable=True)
    meta_description = Column(String(160), nullable=True)

    language = Column(String(5), default="en", index=True)   # en | hi
    status = Column(String(20), default="published", index=True)  # draft | published
    author = Column(String(120), default="GL Technology Team")
    views = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_blog_status_created", "status", "created_at"),
    )
