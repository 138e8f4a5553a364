from sqlalchemy import Column, String, Text
from partflow.core.db import Base
from partflow.models.base.mixins import TimestampMixin


class CategoryModel(Base, TimestampMixin):
    __tablename__ = "categories"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    parent_id = Column(String(64), nullable=True, index=True)
    # emoji or data: URL
    icon = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Category id={self.id} name={self.name} parent={self.parent_id}>"
