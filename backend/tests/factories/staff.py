# backend/tests/factories/staff.py

import factory
from factory import Faker, Sequence

from modules.staff.enums.staff_enums import StaffRole
from modules.staff.schemas.staff_schemas import StaffUser


class StaffUserFactory(factory.Factory):
    class Meta:
        model = StaffUser

    id = Sequence(lambda n: f"waiter-{n}")
    username = Sequence(lambda n: f"waiter{n}")
    name = Faker("name")
    role = StaffRole.WAITER
