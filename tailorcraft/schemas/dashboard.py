# tailorcraft/schemas/dashboard.py
# Схемы сводки админ-панели и списка мастеров.
from typing import Dict, Optional

from tailorcraft.schemas.common import CamelModel


class DashboardOut(CamelModel):
    total_revenue: float
    active_orders: int
    pending_production: int
    total_customers: int
    orders_by_status: Dict[str, int]


class WorkerOut(CamelModel):
    id: str
    name: str
    specialty: str
    performance_rating: Optional[float] = None
    active_orders: int
