# Business Models
from pousada.models.ontology import (
    User, Client, Room, Product, Service, Reservation,
    ProductSale, ServiceSale, InventoryMovement
)

__all__ = [
    'User', 'Client', 'Room', 'Product', 'Service', 'Reservation',
    'ProductSale', 'ServiceSale', 'InventoryMovement'
]
