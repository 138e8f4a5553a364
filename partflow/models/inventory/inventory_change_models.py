from sqlalchemy import CheckConstraint, Column, Index, Integer, String
from partflow.core.db import Base


class InventoryChangeModel(Base):
    __tablename__ = "inventory_changes"

    id = Column(String(64), primary_key=True)
    # no foreign key: ledger rows outlive deleted parts
    part_id = Column(String(64), nullable=False, index=True)
    change_type = Column(String(8), nullable=False)
    quantity = Column(Integer, nullable=False)
    applied_delta = Column(Integer, nullable=True)
    reason = Column(String(500), nullable=True)
    operator = Column(String(255), nullable=True)
    timestamp = Column(String(40), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("change_type IN ('in', 'out')", name="ck_inventory_change_type"),
        CheckConstraint("quantity >= 0", name="ck_inventory_change_quantity_unsigned"),
        Index("ix_inventory_change_part_timestamp", "part_id", "timestamp"),
        Index("ix_inventory_change_type", "change_type"),
    )

    def __repr__(self):
        return f"<InventoryChange id={self.id} part_id={self.part_id} {self.change_type}:{self.quantity}>"
