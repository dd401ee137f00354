"""
Pousada - 民宿管理后台
房间、客户、预订、消费与库存管理
"""
__version__ = "1.0.0"
