"""
库存服务
管理 InventoryMovement 对象并维护 Product.current_stock

库存不做下限保护：出库或销售可以使库存变为负数，只记录警告
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session
from pousada.models.ontology import InventoryMovement, MovementType, Product
from pousada.models.schemas import InventoryMovementCreate
from pousada.services.base import transaction
from pousada.services.catalog_service import CatalogService


class InventoryService:
    """库存服务"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)
        self.catalog = CatalogService(db, self.logger)

    def get_movements(self, product_id: Optional[int] = None) -> List[InventoryMovement]:
        """获取库存变动记录（最新的在前）"""
        query = self.db.query(InventoryMovement)
        if product_id is not None:
            query = query.filter(InventoryMovement.product_id == product_id)
        return query.order_by(InventoryMovement.date.desc(), InventoryMovement.id.desc()).all()

    def adjust_stock(self, product_id: int, delta: int) -> None:
        """
        调整商品库存（不提交，由调用方的事务统一提交）

        在数据库端执行 current_stock = current_stock + delta，
        避免并发下的读-改-写丢失更新
        """
        self.db.query(Product).filter(Product.id == product_id).update(
            {Product.current_stock: Product.current_stock + delta},
            synchronize_session="fetch"
        )

    def check_negative_stock(self, product_id: int) -> None:
        """库存为负时记录警告"""
        product = self.catalog.get_product(product_id)
        if product is not None and product.current_stock < 0:
            self.logger.warning(
                f"Product {product_id} ({product.name}) stock is negative: {product.current_stock}"
            )

    def create_movement(self, data: InventoryMovementCreate) -> InventoryMovement:
        """
        记录库存变动
        入库 +quantity，出库 -quantity；记录与库存调整在同一事务中
        """
        self.catalog.require_product(data.product_id)

        movement = InventoryMovement(**data.model_dump())
        delta = data.quantity if data.type == MovementType.ENTRY else -data.quantity

        with transaction(self.db):
            self.db.add(movement)
            self.db.flush()
            self.adjust_stock(data.product_id, delta)

        self.db.refresh(movement)
        self.logger.info(
            f"Inventory {data.type.value} of {data.quantity} for product {data.product_id}"
        )
        self.check_negative_stock(data.product_id)
        return movement
