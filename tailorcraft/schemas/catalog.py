# tailorcraft/schemas/catalog.py
# Схемы каталога: товары и ткани.
from typing import List, Optional

from pydantic import field_validator

from tailorcraft.schemas.common import CamelModel


class FabricOut(CamelModel):
    id: str
    name: str
    price_per_meter: float
    image: Optional[str] = None


class ProductOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    category: str
    image: Optional[str] = None
    is_customizable: bool
    fabrics: List[str] = []

    @field_validator("fabrics", mode="before")
    @classmethod
    def _fabric_ids(cls, value):
        # ORM отдаёт объекты Fabric, наружу уходят только id
        return [getattr(f, "id", f) for f in value or []]
