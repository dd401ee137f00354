# API Routers
from pousada.routers import (
    dashboard, users, clients, rooms, products, services,
    reservations, product_sales, service_sales, inventory, reports
)

__all__ = [
    'dashboard', 'users', 'clients', 'rooms', 'products', 'services',
    'reservations', 'product_sales', 'service_sales', 'inventory', 'reports'
]
