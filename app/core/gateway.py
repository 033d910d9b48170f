"""
Table-oriented persistence gateway.

Routes and workflows talk to storage only through this class: fetch all rows
of an entity (optionally filtered by column equality), insert one row,
update fields on the row matching an id, delete a row. The billing math in
app.core.billing never sees a session.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog
from app.models.bill import Bill
from app.models.bill_item import BillItem
from app.models.billing_rate import BillingRate
from app.models.deposit import Deposit
from app.models.electric_reading import ElectricReading
from app.models.payment import Payment
from app.models.room import Room
from app.models.tenant import Tenant

ENTITIES = {
    "rooms": Room,
    "tenants": Tenant,
    "billing_rates": BillingRate,
    "electric_readings": ElectricReading,
    "bills": Bill,
    "bill_items": BillItem,
    "payments": Payment,
    "deposits": Deposit,
    "audit_logs": AuditLog,
}


class Gateway:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def model(entity: str):
        """Return the mapped class for a table name. Raises KeyError for unknown entities."""
        return ENTITIES[entity]

    def list(
        self,
        entity: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        **filters: Any,
    ) -> List[Any]:
        model = self.model(entity)
        q = self.db.query(model)
        for column, value in filters.items():
            q = q.filter(getattr(model, column) == value)
        if order_by:
            col = getattr(model, order_by)
            q = q.order_by(col.desc() if descending else col)
        return q.all()

    def first(self, entity: str, **filters: Any) -> Optional[Any]:
        model = self.model(entity)
        q = self.db.query(model)
        for column, value in filters.items():
            q = q.filter(getattr(model, column) == value)
        return q.first()

    def get(self, entity: str, row_id: str) -> Optional[Any]:
        return self.db.get(self.model(entity), row_id)

    def insert(self, entity: str, row: Dict[str, Any], commit: bool = True) -> Any:
        obj = self.model(entity)(**row)
        self.db.add(obj)
        if commit:
            self.db.commit()
            self.db.refresh(obj)
        else:
            self.db.flush()
        return obj

    def update(self, entity: str, row_id: str, patch: Dict[str, Any], commit: bool = True) -> Optional[Any]:
        obj = self.get(entity, row_id)
        if obj is None:
            return None
        for k, v in patch.items():
            setattr(obj, k, v)
        if commit:
            self.db.commit()
            self.db.refresh(obj)
        else:
            self.db.flush()
        return obj

    def delete(self, entity: str, row_id: str, commit: bool = True) -> bool:
        obj = self.get(entity, row_id)
        if obj is None:
            return False
        self.db.delete(obj)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return True

    def commit(self) -> None:
        self.db.commit()
