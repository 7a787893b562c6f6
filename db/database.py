from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from functions.settings import get_settings

DATABASE_URL = get_settings().database_url

# SQLite needs cross-thread access for the threadpool FastAPI runs sync routes in
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_tables(bind=engine):
    """Create every table registered on Base."""
    # model modules register themselves on Base when imported
    import models.Products  # noqa: F401
    import models.userModels  # noqa: F401
    import models.blog  # noqa: F401
    import models.orders  # noqa: F401
    import models.invoices  # noqa: F401

    Base.metadata.create_all(bind=bind)
