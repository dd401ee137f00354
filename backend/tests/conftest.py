"""
Pytest 配置和共享 fixtures
"""
import os

# 应用启动时的 init_db 不落盘
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from decimal import Decimal

from pousada.database import Base, get_db
from pousada.models import ontology  # noqa
from pousada.models.ontology import (
    User, UserRole, Client, Room, RoomType, RoomStatus, Product, Service,
    Reservation, ReservationStatus
)
from pousada.security.auth import get_password_hash
from pousada.main import app


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== 实体相关 Fixtures ==============

@pytest.fixture
def sample_manager(db_session):
    """创建经理"""
    manager = User(
        full_name="Ana Souza",
        role=UserRole.MANAGER,
        username="manager",
        password_hash=get_password_hash("123456"),
        permissions=[]
    )
    db_session.add(manager)
    db_session.commit()
    db_session.refresh(manager)
    return manager


@pytest.fixture
def sample_client(db_session):
    """创建测试客户"""
    guest = Client(
        full_name="João Silva",
        cpf="123.456.789-00",
        phone="11999990000",
        email="joao@example.com"
    )
    db_session.add(guest)
    db_session.commit()
    db_session.refresh(guest)
    return guest


@pytest.fixture
def sample_room(db_session):
    """创建测试房间（日租 100.00）"""
    room = Room(
        number="101",
        type=RoomType.DOUBLE,
        capacity=2,
        daily_rate=Decimal("100.00"),
        status=RoomStatus.AVAILABLE
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_room_102(db_session):
    """创建102房间"""
    room = Room(
        number="102",
        type=RoomType.SUITE,
        capacity=4,
        daily_rate=Decimal("250.00"),
        status=RoomStatus.AVAILABLE
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_product(db_session):
    """创建测试商品（库存 10）"""
    product = Product(
        name="Água mineral",
        category="bebidas",
        unit="un",
        sale_price=Decimal("4.25"),
        cost_price=Decimal("1.50"),
        current_stock=10
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


@pytest.fixture
def sample_service(db_session):
    """创建测试服务"""
    service = Service(
        name="Lavanderia",
        description="Lavagem e passagem",
        price=Decimal("40.00"),
        estimated_time="24h"
    )
    db_session.add(service)
    db_session.commit()
    db_session.refresh(service)
    return service


@pytest.fixture
def active_reservation(db_session, sample_client, sample_room):
    """创建已入住的预订（入住于约两天前，房间占用中）"""
    now = datetime.now()
    reservation = Reservation(
        client_id=sample_client.id,
        room_id=sample_room.id,
        check_in_date=now - timedelta(days=2) + timedelta(hours=1),
        expected_check_out_date=now + timedelta(days=1),
        number_of_guests=2,
        status=ReservationStatus.ACTIVE,
        total_amount=Decimal("0")
    )
    sample_room.status = RoomStatus.OCCUPIED
    db_session.add(reservation)
    db_session.commit()
    db_session.refresh(reservation)
    return reservation
