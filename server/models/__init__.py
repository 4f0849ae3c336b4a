# server/models/__init__.py

from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def utcnow():
    # timezone-aware, so creation order survives DST changes on the host
    return datetime.now(timezone.utc)
