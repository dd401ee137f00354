# Business Services
from pousada.services.room_service import RoomService
from pousada.services.client_service import ClientService
from pousada.services.user_service import UserService
from pousada.services.catalog_service import CatalogService
from pousada.services.inventory_service import InventoryService
from pousada.services.sales_service import SalesService
from pousada.services.checkout_service import CheckOutService
from pousada.services.reservation_service import ReservationService
from pousada.services.report_service import ReportService

__all__ = [
    'RoomService', 'ClientService', 'UserService', 'CatalogService',
    'InventoryService', 'SalesService', 'CheckOutService',
    'ReservationService', 'ReportService'
]
