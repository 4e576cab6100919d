# tailorcraft/api/catalog.py
# Каталог: товары и ткани, только чтение.
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tailorcraft.core.errors import NotFoundError
from tailorcraft.db.session import get_db
from tailorcraft.models.product import Fabric, Product
from tailorcraft.schemas.catalog import FabricOut, ProductOut

router = APIRouter()

@router.get("/products", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return db.query(Product).order_by(Product.id).all()

@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found.")
    return product

@router.get("/fabrics", response_model=List[FabricOut])
def list_fabrics(db: Session = Depends(get_db)):
    return db.query(Fabric).order_by(Fabric.id).all()
