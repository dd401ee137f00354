"""
业务对象定义
所有业务实体通过对象、属性、链接进行建模

Room.status 与 Product.current_stock 是派生字段：
由预订/退房、销售、库存变动的副作用维护
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text,
    Enum as SQLEnum, Numeric, JSON
)
from sqlalchemy.orm import relationship
from pousada.database import Base


# ============== 枚举定义 ==============

class UserRole(str, Enum):
    """员工角色"""
    MANAGER = "manager"            # 经理
    RECEPTIONIST = "receptionist"  # 前台
    STAFF = "staff"                # 普通员工


class RoomType(str, Enum):
    """房型"""
    SINGLE = "single"    # 单人间
    DOUBLE = "double"    # 双人间
    FAMILY = "family"    # 家庭房
    SUITE = "suite"      # 套房


class RoomStatus(str, Enum):
    """房间状态"""
    AVAILABLE = "available"       # 空闲
    OCCUPIED = "occupied"         # 入住中
    MAINTENANCE = "maintenance"   # 维修中


class ReservationStatus(str, Enum):
    """预订状态"""
    ACTIVE = "active"          # 在住/待入住
    COMPLETED = "completed"    # 已退房
    CANCELLED = "cancelled"    # 已取消


class PaymentMethod(str, Enum):
    """支付方式"""
    PIX = "pix"
    CARD = "card"
    CASH = "cash"
    TRANSFER = "transfer"


class ServiceSaleStatus(str, Enum):
    """服务消费状态"""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MovementType(str, Enum):
    """库存变动类型"""
    ENTRY = "entry"   # 入库
    EXIT = "exit"     # 出库


# ============== 业务对象定义 ==============

class User(Base):
    """
    员工对象
    password_hash 只保存 bcrypt 哈希；permissions 为 Permission 编码列表
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False)
    phone = Column(String(20))
    email = Column(String(100))
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    permissions = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.now, nullable=False)


class Client(Base):
    """
    客户对象
    一个客户可以有零到多个预订
    """
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    cpf = Column(String(20))                  # 税号
    rg = Column(String(20))                   # 身份证号
    birth_date = Column(String(20))
    phone = Column(String(20))
    email = Column(String(100))
    address = Column(Text)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    reservations = relationship("Reservation", back_populates="client")


class Room(Base):
    """
    房间对象
    status 由入住/退房联动更新，也可由员工手动置为维修
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(String(10), unique=True, nullable=False)
    type = Column(SQLEnum(RoomType), nullable=False)
    capacity = Column(Integer, nullable=False)
    daily_rate = Column(Numeric(10, 2), nullable=False)
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False)
    notes = Column(Text)

    reservations = relationship("Reservation", back_populates="room")


class Product(Base):
    """
    商品对象
    current_stock 只通过销售与库存变动调整，允许为负
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False)
    unit = Column(String(10), nullable=False)          # un, L, kg ...
    sale_price = Column(Numeric(10, 2), nullable=False)
    cost_price = Column(Numeric(10, 2))
    current_stock = Column(Integer, default=0, nullable=False)
    supplier = Column(String(100))


class Service(Base):
    """服务对象（无库存概念）"""
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    estimated_time = Column(String(50))


class Reservation(Base):
    """
    预订对象 - 一次住宿的聚合根
    同一房间的 active 预订，其 [check_in_date, expected_check_out_date) 区间两两不重叠
    """
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    check_in_date = Column(DateTime, nullable=False)
    expected_check_out_date = Column(DateTime, nullable=False)
    actual_check_out_date = Column(DateTime)
    number_of_guests = Column(Integer, nullable=False)
    payment_method = Column(SQLEnum(PaymentMethod))
    status = Column(SQLEnum(ReservationStatus), default=ReservationStatus.ACTIVE, nullable=False)
    total_amount = Column(Numeric(10, 2), default=0)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    # 链接
    client = relationship("Client", back_populates="reservations")
    room = relationship("Room", back_populates="reservations")
    product_sales = relationship("ProductSale", back_populates="reservation")
    service_sales = relationship("ServiceSale", back_populates="reservation")


class ProductSale(Base):
    """
    商品消费记录
    total_price 在创建时按 unit_price * quantity 计算，之后不再重算
    """
    __tablename__ = "product_sales"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    sale_date = Column(DateTime, default=datetime.now, nullable=False)

    reservation = relationship("Reservation", back_populates="product_sales")
    product = relationship("Product")


class ServiceSale(Base):
    """
    服务消费记录
    price 为销售时的服务价格快照
    """
    __tablename__ = "service_sales"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    scheduled_date = Column(DateTime)
    completed_date = Column(DateTime)
    status = Column(SQLEnum(ServiceSaleStatus), default=ServiceSaleStatus.PENDING, nullable=False)
    sale_date = Column(DateTime, default=datetime.now, nullable=False)

    reservation = relationship("Reservation", back_populates="service_sales")
    service = relationship("Service")


class InventoryMovement(Base):
    """库存变动记录：entry 增加库存，exit 减少库存"""
    __tablename__ = "inventory_movements"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    type = Column(SQLEnum(MovementType), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_cost = Column(Numeric(10, 2))
    reason = Column(Text)
    date = Column(DateTime, default=datetime.now, nullable=False)

    product = relationship("Product")
