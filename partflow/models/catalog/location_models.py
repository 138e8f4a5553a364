from sqlalchemy import Column, String, Text
from partflow.core.db import Base
from partflow.models.base.mixins import TimestampMixin


class LocationModel(Base, TimestampMixin):
    __tablename__ = "locations"

    id = Column(String(64), primary_key=True)
    code = Column(String(50), nullable=False, unique=True, index=True)  # box code, stored uppercase
    name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Location id={self.id} code={self.code}>"
