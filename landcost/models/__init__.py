from .shipping_agency import ShippingAgency  # noqa
from .supplier_order import DELIVERY_STATUSES, Delivery, SupplierOrder, SupplierOrderItem  # noqa
