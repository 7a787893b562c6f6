from fastapi import Depends
from sqlalchemy.orm import Session
from .database import SessionLocal
from typing import Annotated


def get_db():
    """One session per request; uncommitted work is rolled back if the handler fails."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


db_dependency = Annotated[Session, Depends(get_db)]
