from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from cargoplan.config import get_settings

settings = get_settings()

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # Sync routes run in the threadpool, sessions may cross threads
    connect_args = {"check_same_thread": False}

# pool_pre_ping=True helps reconnect if DB connection drops
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_session():
    """Dependency for FastAPI Routes"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

get_db = get_session
