from typing import Dict
from pydantic import BaseModel

class KPIStats(BaseModel):
    total_plans: int
    active_plans: int
    total_requests: int
    requests_by_status: Dict[str, int]
    total_revenue: float
    vehicles_with_revenue: int
