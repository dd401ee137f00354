"""
Pydantic 模式定义
用于 API 请求/响应验证
金额字段使用 Decimal，JSON 中序列化为字符串
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, ConfigDict
from pousada.models.ontology import (
    UserRole, RoomType, RoomStatus, ReservationStatus, PaymentMethod,
    ServiceSaleStatus, MovementType
)
from pousada.security.permissions import Permission


def _to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """带时区的时间统一转换为本地时间（不带时区）存储"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# ============== 员工 Schemas ==============

class UserBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    username: str = Field(..., min_length=1, max_length=50)
    permissions: List[Permission] = []


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    password: Optional[str] = Field(None, min_length=1)
    permissions: Optional[List[Permission]] = None


class UserResponse(UserBase):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)

    @field_validator('permissions', mode='before')
    @classmethod
    def default_permissions(cls, v):
        return v or []


# ============== 客户 Schemas ==============

class ClientBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    cpf: Optional[str] = Field(None, max_length=20)
    rg: Optional[str] = Field(None, max_length=20)
    birth_date: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    cpf: Optional[str] = Field(None, max_length=20)
    rg: Optional[str] = Field(None, max_length=20)
    birth_date: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None


class ClientResponse(ClientBase):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== 房间 Schemas ==============

class RoomBase(BaseModel):
    number: str = Field(..., min_length=1, max_length=10)
    type: RoomType
    capacity: int = Field(..., ge=1)
    daily_rate: Decimal = Field(..., ge=0)
    status: RoomStatus = RoomStatus.AVAILABLE
    notes: Optional[str] = None


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    number: Optional[str] = Field(None, min_length=1, max_length=10)
    type: Optional[RoomType] = None
    capacity: Optional[int] = Field(None, ge=1)
    daily_rate: Optional[Decimal] = Field(None, ge=0)
    status: Optional[RoomStatus] = None
    notes: Optional[str] = None


class RoomResponse(RoomBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


# ============== 商品 Schemas ==============

class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=50)
    unit: str = Field(..., min_length=1, max_length=10)
    sale_price: Decimal = Field(..., ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    current_stock: int = 0
    supplier: Optional[str] = Field(None, max_length=100)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    unit: Optional[str] = Field(None, min_length=1, max_length=10)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    current_stock: Optional[int] = None
    supplier: Optional[str] = Field(None, max_length=100)


class ProductResponse(ProductBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


# ============== 服务 Schemas ==============

class ServiceBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    estimated_time: Optional[str] = Field(None, max_length=50)


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    estimated_time: Optional[str] = Field(None, max_length=50)


class ServiceResponse(ServiceBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


# ============== 预订 Schemas ==============

class ReservationCreate(BaseModel):
    client_id: int
    room_id: int
    check_in_date: datetime
    expected_check_out_date: datetime
    number_of_guests: int = Field(..., ge=1)
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None

    @field_validator('check_in_date', 'expected_check_out_date')
    @classmethod
    def normalize_datetime(cls, v: datetime) -> datetime:
        return _to_local_naive(v)


class ReservationUpdate(BaseModel):
    """
    预订部分更新
    status=completed 走退房流程，status=cancelled 走取消流程
    """
    client_id: Optional[int] = None
    room_id: Optional[int] = None
    check_in_date: Optional[datetime] = None
    expected_check_out_date: Optional[datetime] = None
    number_of_guests: Optional[int] = Field(None, ge=1)
    payment_method: Optional[PaymentMethod] = None
    status: Optional[ReservationStatus] = None
    notes: Optional[str] = None
    # 退房字段
    actual_check_out_date: Optional[datetime] = None
    total_amount: Optional[Decimal] = Field(None, ge=0)
    discount_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    @field_validator('check_in_date', 'expected_check_out_date', 'actual_check_out_date')
    @classmethod
    def normalize_datetime(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_local_naive(v)


class ReservationResponse(BaseModel):
    id: int
    client_id: int
    room_id: int
    check_in_date: datetime
    expected_check_out_date: datetime
    actual_check_out_date: Optional[datetime] = None
    number_of_guests: int
    payment_method: Optional[PaymentMethod] = None
    status: ReservationStatus
    total_amount: Decimal = Decimal("0")
    notes: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CheckOutRequest(BaseModel):
    payment_method: PaymentMethod
    discount_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    # 客户端计算的总额，仅用于核对，最终金额以服务端重算为准
    total_amount: Optional[Decimal] = Field(None, ge=0)


class ReservationCancel(BaseModel):
    reason: Optional[str] = None


# ============== 消费 Schemas ==============

class ProductSaleCreate(BaseModel):
    reservation_id: int
    product_id: int
    quantity: int = Field(..., ge=1)
    unit_price: Optional[Decimal] = Field(None, ge=0)


class ProductSaleResponse(BaseModel):
    id: int
    reservation_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    sale_date: datetime
    model_config = ConfigDict(from_attributes=True)


class ServiceSaleCreate(BaseModel):
    reservation_id: int
    service_id: int
    price: Optional[Decimal] = Field(None, ge=0)
    scheduled_date: Optional[datetime] = None

    @field_validator('scheduled_date')
    @classmethod
    def normalize_datetime(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_local_naive(v)


class ServiceSaleUpdate(BaseModel):
    status: Optional[ServiceSaleStatus] = None
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None

    @field_validator('scheduled_date', 'completed_date')
    @classmethod
    def normalize_datetime(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_local_naive(v)


class ServiceSaleResponse(BaseModel):
    id: int
    reservation_id: int
    service_id: int
    price: Decimal
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    status: ServiceSaleStatus
    sale_date: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== 库存 Schemas ==============

class InventoryMovementCreate(BaseModel):
    product_id: int
    type: MovementType
    quantity: int = Field(..., gt=0)
    unit_cost: Optional[Decimal] = Field(None, ge=0)
    reason: Optional[str] = None


class InventoryMovementResponse(BaseModel):
    id: int
    product_id: int
    type: MovementType
    quantity: int
    unit_cost: Optional[Decimal] = None
    reason: Optional[str] = None
    date: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== 账单明细 Schemas ==============

class StayCharges(BaseModel):
    """退房费用明细（展示用，不持久化）"""
    reservation_id: int
    check_in_date: datetime
    check_out_date: datetime
    nights: int
    daily_rate: Decimal
    accommodation_total: Decimal
    products_total: Decimal
    services_total: Decimal
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    product_sales: List[ProductSaleResponse] = []
    service_sales: List[ServiceSaleResponse] = []


# ============== 报表 Schemas ==============

class DashboardStats(BaseModel):
    occupied_rooms: int
    total_rooms: int
    check_ins_today: int
    check_outs_today: int
    revenue_today: Decimal


class FinancialReport(BaseModel):
    this_month_revenue: Decimal
    last_month_revenue: Decimal
    revenue_growth: float
    product_revenue: Decimal
    service_revenue: Decimal
    total_revenue: Decimal
    this_month_reservations: int
    last_month_reservations: int


class OccupancyReport(BaseModel):
    total_rooms: int
    occupied_rooms: int
    available_rooms: int
    maintenance_rooms: int
    occupancy_rate: float
    this_month_check_ins: int
