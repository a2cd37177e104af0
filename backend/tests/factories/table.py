# backend/tests/factories/table.py

import factory
from factory import LazyFunction, Sequence

from modules.tables.models.table_models import TableStatus
from modules.tables.schemas.table_schemas import Table


class TableFactory(factory.Factory):
    """Factory for dining tables."""

    class Meta:
        model = Table

    id = Sequence(lambda n: f"table-{n}")
    number = Sequence(lambda n: n + 1)
    seats = 4
    status = TableStatus.AVAILABLE
    orders = LazyFunction(list)
    waiter_id = None
    active = True
