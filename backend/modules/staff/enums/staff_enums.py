from enum import Enum


class StaffRole(str, Enum):
    WAITER = "waiter"
    KITCHEN = "kitchen"
    MANAGER = "manager"
