from enum import Enum


class SplitMethod(str, Enum):
    FULL = "full"
    EQUAL = "equal"
    CUSTOM = "custom"
    BY_ITEMS = "items"


class PaymentMethod(str, Enum):
    """Label recorded on the receipt. No payment is processed."""

    CREDIT = "credit"
    DEBIT = "debit"
    CASH = "cash"
    PIX = "pix"
