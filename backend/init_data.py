"""
初始化数据脚本
创建：默认经理账号、房间、商品、服务项目（已存在的跳过）

默认账号：
  admin      经理     密码 123456
"""
from decimal import Decimal
from pousada.database import SessionLocal, init_db
from pousada.models.ontology import (
    User, UserRole, Room, RoomType, RoomStatus, Product, Service
)
from pousada.security.auth import get_password_hash


def init_users(db):
    """初始化默认经理"""
    if not db.query(User).filter(User.username == 'admin').first():
        db.add(User(
            full_name='Administrador',
            role=UserRole.MANAGER,
            username='admin',
            password_hash=get_password_hash('123456'),
            permissions=[],
        ))
    db.flush()


def init_rooms(db):
    """初始化房间：1 楼单人/双人间，2 楼家庭房与套房"""
    room_defs = [
        ('101', RoomType.SINGLE, 1, Decimal('120.00')),
        ('102', RoomType.SINGLE, 1, Decimal('120.00')),
        ('103', RoomType.DOUBLE, 2, Decimal('180.00')),
        ('104', RoomType.DOUBLE, 2, Decimal('180.00')),
        ('201', RoomType.FAMILY, 4, Decimal('260.00')),
        ('202', RoomType.FAMILY, 4, Decimal('260.00')),
        ('203', RoomType.SUITE, 2, Decimal('350.00')),
    ]
    for number, room_type, capacity, rate in room_defs:
        if not db.query(Room).filter(Room.number == number).first():
            db.add(Room(
                number=number, type=room_type, capacity=capacity,
                daily_rate=rate, status=RoomStatus.AVAILABLE,
            ))
    db.flush()


def init_products(db):
    """初始化商品（小冰箱与前台零售）"""
    product_defs = [
        {'name': 'Água mineral 500ml', 'category': 'bebidas', 'unit': 'un',
         'sale_price': Decimal('5.00'), 'cost_price': Decimal('1.80'), 'current_stock': 48},
        {'name': 'Refrigerante lata', 'category': 'bebidas', 'unit': 'un',
         'sale_price': Decimal('7.00'), 'cost_price': Decimal('3.20'), 'current_stock': 36},
        {'name': 'Cerveja long neck', 'category': 'bebidas', 'unit': 'un',
         'sale_price': Decimal('12.00'), 'cost_price': Decimal('5.50'), 'current_stock': 24},
        {'name': 'Chocolate', 'category': 'snacks', 'unit': 'un',
         'sale_price': Decimal('8.50'), 'cost_price': Decimal('4.00'), 'current_stock': 20},
        {'name': 'Protetor solar', 'category': 'conveniência', 'unit': 'un',
         'sale_price': Decimal('45.00'), 'cost_price': Decimal('28.00'), 'current_stock': 6},
    ]
    for data in product_defs:
        if not db.query(Product).filter(Product.name == data['name']).first():
            db.add(Product(**data))
    db.flush()


def init_services(db):
    """初始化服务项目"""
    service_defs = [
        {'name': 'Lavanderia', 'description': 'Lavagem e passagem de roupas',
         'price': Decimal('40.00'), 'estimated_time': '24h'},
        {'name': 'Café da manhã no quarto', 'description': 'Serviço de quarto',
         'price': Decimal('35.00'), 'estimated_time': '30min'},
        {'name': 'Passeio de barco', 'description': 'Passeio guiado pela baía',
         'price': Decimal('120.00'), 'estimated_time': '4h'},
        {'name': 'Transfer aeroporto', 'description': None,
         'price': Decimal('90.00'), 'estimated_time': '1h'},
    ]
    for data in service_defs:
        if not db.query(Service).filter(Service.name == data['name']).first():
            db.add(Service(**data))
    db.flush()


def main():
    """主函数"""
    print("=" * 50)
    print("Pousada 初始化数据")
    print("=" * 50)

    # 初始化数据库
    init_db()
    print("数据库表创建完成")

    db = SessionLocal()
    try:
        init_users(db)
        init_rooms(db)
        init_products(db)
        init_services(db)
        db.commit()

        print("=" * 50)
        print("初始化完成！")
        print()
        print("默认账号：admin / 123456（经理）")
        print("=" * 50)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == '__main__':
    main()
