from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    DONE = "done"
    DELIVERED = "delivered"
