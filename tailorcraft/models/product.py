# tailorcraft/models/product.py
# Каталог: товары (Product) и ткани (Fabric). Только чтение для ядра заказов.
from sqlalchemy import Column, String, Numeric, Boolean, Text, ForeignKey, Table
from sqlalchemy.orm import relationship
from tailorcraft.db.base import Base

# Допустимые ткани для индивидуального пошива; пустой набор — без ограничений
product_fabrics = Table(
    "product_fabrics",
    Base.metadata,
    Column("product_id", String, ForeignKey("products.id"), primary_key=True),
    Column("fabric_id", String, ForeignKey("fabrics.id"), primary_key=True),
)

class Fabric(Base):
    __tablename__ = "fabrics"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    price_per_meter = Column(Numeric(10, 2), nullable=False)
    image = Column(String, nullable=True)

class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String, nullable=False, index=True)
    image = Column(String, nullable=True)
    is_customizable = Column(Boolean, default=False, nullable=False)

    fabrics = relationship("Fabric", secondary=product_fabrics, lazy="selectin")

    @property
    def fabric_ids(self) -> list[str]:
        return [f.id for f in self.fabrics]
