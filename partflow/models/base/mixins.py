from sqlalchemy import Column, String


class TimestampMixin:
    # ISO-8601 strings stamped by the domain layer, not by the database
    created_at = Column(String(40), nullable=False, index=True)
    updated_at = Column(String(40), nullable=False)
