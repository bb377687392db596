"""Route identifiers dispatched to the navigation callback."""

from enum import Enum
from typing import Callable

from billed.models.session import UserType


# Receives one of the Route values
Navigator = Callable[[str], None]


class Route(str, Enum):
    LOGIN = "/"
    BILLS = "#employee/bills"
    NEW_BILL = "#employee/bill/new"
    DASHBOARD = "#admin/dashboard"


def landing_route(user_type: UserType) -> Route:
    """Page a user lands on after signing in."""
    if user_type == UserType.ADMIN:
        return Route.DASHBOARD
    return Route.BILLS
