from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from decouple import config

DATABASE_URL = config("DATABASE_URL")
SQL_ECHO = config("SQL_ECHO", default=False, cast=bool)

if DATABASE_URL.startswith("sqlite"):
    # Requests are served from a threadpool, so the connection crosses threads
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        echo=SQL_ECHO,
    )
else:
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True,  # Enables pessimistic disconnect handling
        pool_recycle=300,    # Recycle connections every 5 minutes
        echo=SQL_ECHO,
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    # Import models so they register on Base.metadata
    from legalmatters import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
