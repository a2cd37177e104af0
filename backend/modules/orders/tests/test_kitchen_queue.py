from datetime import datetime, timedelta

from modules.orders.enums.order_enums import OrderStatus
from modules.orders.services.kitchen_queue_service import KitchenQueueService
from tests.factories import OrderFactory, TableFactory


class TestKitchenQueue:

    def test_queue_splits_active_and_ready_orders(self, repository):
        start = datetime(2024, 5, 1, 19, 0)
        late = OrderFactory(created_at=start + timedelta(minutes=10))
        early = OrderFactory(
            created_at=start, status=OrderStatus.PREPARING, preparing_at=start
        )
        ready = OrderFactory(
            created_at=start,
            status=OrderStatus.DONE,
            preparing_at=start,
            done_at=start + timedelta(minutes=5),
        )
        served = OrderFactory(delivered=True)

        repository.save_table(TableFactory(number=1, orders=[late, served]))
        repository.save_table(TableFactory(number=2, orders=[early, ready]))

        queue = KitchenQueueService(repository).get_kitchen_queue()

        assert [t.order.id for t in queue.active] == [early.id, late.id]
        assert [t.table_number for t in queue.active] == [2, 1]
        assert [t.order.id for t in queue.awaiting_delivery] == [ready.id]

    def test_empty_floor_has_empty_queue(self, repository):
        repository.save_table(TableFactory())
        queue = KitchenQueueService(repository).get_kitchen_queue()
        assert queue.active == []
        assert queue.awaiting_delivery == []
