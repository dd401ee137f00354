"""
商品与服务目录
管理 Product 和 Service 对象
商品库存只应通过销售与库存变动调整，这里的更新是员工的手工修正
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session
from pousada.models.ontology import (
    Product, Service, ProductSale, ServiceSale, InventoryMovement
)
from pousada.models.schemas import (
    ProductCreate, ProductUpdate, ServiceCreate, ServiceUpdate
)
from pousada.services.base import transaction
from pousada.services.errors import NotFoundError, ValidationError


class CatalogService:
    """商品与服务目录"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    # ============== 商品 ==============

    def get_products(self, category: Optional[str] = None) -> List[Product]:
        """获取商品列表（按名称排序）"""
        query = self.db.query(Product)
        if category:
            query = query.filter(Product.category == category)
        return query.order_by(Product.name).all()

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def require_product(self, product_id: int) -> Product:
        product = self.get_product(product_id)
        if not product:
            raise NotFoundError("商品不存在")
        return product

    def create_product(self, data: ProductCreate) -> Product:
        product = Product(**data.model_dump())
        with transaction(self.db):
            self.db.add(product)
        self.db.refresh(product)
        return product

    def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        product = self.require_product(product_id)
        update_data = data.model_dump(exclude_unset=True)
        if 'current_stock' in update_data and update_data['current_stock'] != product.current_stock:
            self.logger.warning(
                f"Product {product_id} stock edited manually: "
                f"{product.current_stock} -> {update_data['current_stock']}"
            )
        with transaction(self.db):
            for key, value in update_data.items():
                setattr(product, key, value)
        self.db.refresh(product)
        return product

    def delete_product(self, product_id: int) -> bool:
        """删除商品（有销售或库存记录的商品不可删除）"""
        product = self.require_product(product_id)
        sale_count = self.db.query(ProductSale).filter(ProductSale.product_id == product_id).count()
        movement_count = self.db.query(InventoryMovement).filter(
            InventoryMovement.product_id == product_id
        ).count()
        if sale_count or movement_count:
            raise ValidationError("该商品已有销售或库存记录，无法删除")

        with transaction(self.db):
            self.db.delete(product)
        return True

    # ============== 服务 ==============

    def get_services(self) -> List[Service]:
        """获取服务列表（按名称排序）"""
        return self.db.query(Service).order_by(Service.name).all()

    def get_service(self, service_id: int) -> Optional[Service]:
        return self.db.query(Service).filter(Service.id == service_id).first()

    def require_service(self, service_id: int) -> Service:
        service = self.get_service(service_id)
        if not service:
            raise NotFoundError("服务不存在")
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        service = Service(**data.model_dump())
        with transaction(self.db):
            self.db.add(service)
        self.db.refresh(service)
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.require_service(service_id)
        with transaction(self.db):
            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(service, key, value)
        self.db.refresh(service)
        return service

    def delete_service(self, service_id: int) -> bool:
        """删除服务（有消费记录的服务不可删除）"""
        service = self.require_service(service_id)
        sale_count = self.db.query(ServiceSale).filter(ServiceSale.service_id == service_id).count()
        if sale_count:
            raise ValidationError(f"该服务有 {sale_count} 条消费记录，无法删除")

        with transaction(self.db):
            self.db.delete(service)
        return True
