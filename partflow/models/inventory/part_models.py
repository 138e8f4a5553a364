from sqlalchemy import CheckConstraint, Column, Integer, String, Text
from partflow.core.db import Base
from partflow.models.base.mixins import TimestampMixin


class PartModel(Base, TimestampMixin):
    __tablename__ = "parts"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    specification = Column(String(500), nullable=True)
    material = Column(String(255), nullable=True)
    # JSON-encoded list, order and duplicates preserved
    tags = Column(Text, nullable=False, default="[]")
    # soft references, no foreign keys
    category_id = Column(String(64), nullable=True, index=True)
    location_id = Column(String(64), nullable=True, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    min_quantity = Column(Integer, nullable=True)
    image_url = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_part_quantity_non_negative"),
        CheckConstraint(
            "min_quantity IS NULL OR min_quantity >= 0",
            name="ck_part_min_quantity_non_negative",
        ),
    )

    def __repr__(self):
        return f"<Part id={self.id} name={self.name} qty={self.quantity}>"
