"""
消费服务
管理 ProductSale 和 ServiceSale 对象（挂在预订上的商品与服务消费）
"""
from typing import List, Optional
from datetime import datetime
import logging
from sqlalchemy.orm import Session
from pousada.models.ontology import (
    ProductSale, ServiceSale, ServiceSaleStatus, Reservation
)
from pousada.models.schemas import ProductSaleCreate, ServiceSaleCreate, ServiceSaleUpdate
from pousada.services.base import transaction, to_money
from pousada.services.catalog_service import CatalogService
from pousada.services.errors import NotFoundError, InvalidStateError
from pousada.services.inventory_service import InventoryService


class SalesService:
    """消费服务"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)
        self.catalog = CatalogService(db, self.logger)
        self.inventory = InventoryService(db, self.logger)

    def _require_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.db.query(Reservation).filter(Reservation.id == reservation_id).first()
        if not reservation:
            raise NotFoundError("预订不存在")
        return reservation

    # ============== 商品消费 ==============

    def get_product_sales(self, reservation_id: Optional[int] = None) -> List[ProductSale]:
        """获取商品消费记录（可按预订筛选，最新的在前）"""
        query = self.db.query(ProductSale)
        if reservation_id is not None:
            query = query.filter(ProductSale.reservation_id == reservation_id)
        return query.order_by(ProductSale.sale_date.desc(), ProductSale.id.desc()).all()

    def create_product_sale(self, data: ProductSaleCreate) -> ProductSale:
        """
        记录商品消费
        1. 单价默认取商品当前售价，总价 = 单价 * 数量（之后不再重算）
        2. 扣减商品库存，与消费记录在同一事务中提交
        """
        self._require_reservation(data.reservation_id)
        product = self.catalog.require_product(data.product_id)

        unit_price = to_money(data.unit_price if data.unit_price is not None else product.sale_price)
        sale = ProductSale(
            reservation_id=data.reservation_id,
            product_id=data.product_id,
            quantity=data.quantity,
            unit_price=unit_price,
            total_price=to_money(unit_price * data.quantity),
        )

        with transaction(self.db):
            self.db.add(sale)
            self.db.flush()
            self.inventory.adjust_stock(data.product_id, -data.quantity)

        self.db.refresh(sale)
        self.logger.info(
            f"Product sale {sale.id}: {data.quantity} x product {data.product_id} "
            f"for reservation {data.reservation_id}"
        )
        self.inventory.check_negative_stock(data.product_id)
        return sale

    def delete_product_sale(self, sale_id: int) -> bool:
        """
        删除商品消费记录
        注意：不回补库存（删除视为账务更正，商品已被消耗）
        """
        sale = self.db.query(ProductSale).filter(ProductSale.id == sale_id).first()
        if not sale:
            raise NotFoundError("消费记录不存在")

        with transaction(self.db):
            self.db.delete(sale)
        self.logger.info(f"Product sale {sale_id} deleted (stock not restored)")
        return True

    # ============== 服务消费 ==============

    def get_service_sales(self, reservation_id: Optional[int] = None) -> List[ServiceSale]:
        """获取服务消费记录（可按预订筛选，最新的在前）"""
        query = self.db.query(ServiceSale)
        if reservation_id is not None:
            query = query.filter(ServiceSale.reservation_id == reservation_id)
        return query.order_by(ServiceSale.sale_date.desc(), ServiceSale.id.desc()).all()

    def create_service_sale(self, data: ServiceSaleCreate) -> ServiceSale:
        """记录服务消费（价格默认取服务当前价格的快照）"""
        self._require_reservation(data.reservation_id)
        service = self.catalog.require_service(data.service_id)

        sale = ServiceSale(
            reservation_id=data.reservation_id,
            service_id=data.service_id,
            price=to_money(data.price if data.price is not None else service.price),
            scheduled_date=data.scheduled_date,
            status=ServiceSaleStatus.PENDING,
        )
        with transaction(self.db):
            self.db.add(sale)
        self.db.refresh(sale)
        self.logger.info(
            f"Service sale {sale.id}: service {data.service_id} for reservation {data.reservation_id}"
        )
        return sale

    def update_service_sale(self, sale_id: int, data: ServiceSaleUpdate) -> ServiceSale:
        """
        更新服务消费
        状态只能从 pending 变为 completed 或 cancelled
        """
        sale = self.db.query(ServiceSale).filter(ServiceSale.id == sale_id).first()
        if not sale:
            raise NotFoundError("服务消费记录不存在")

        if sale.status != ServiceSaleStatus.PENDING:
            raise InvalidStateError(f"状态为 {sale.status.value} 的服务消费不可修改")

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        target = update_data.get('status')

        with transaction(self.db):
            for key, value in update_data.items():
                setattr(sale, key, value)
            if target == ServiceSaleStatus.COMPLETED and sale.completed_date is None:
                sale.completed_date = datetime.now()
        self.db.refresh(sale)
        return sale
