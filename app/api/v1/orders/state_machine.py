"""
Order state machine for managing order status transitions
"""

from typing import Dict, List, Set
from app.models.order import OrderStatus

class OrderStateMachine:
    """
    Manages valid order status transitions

    Orders move forward one step at a time; cancellation is possible until
    the order has shipped.
    """

    def __init__(self):
        self.transitions: Dict[OrderStatus, Set[OrderStatus]] = {
            OrderStatus.PENDING: {
                OrderStatus.CONFIRMED,
                OrderStatus.CANCELLED
            },
            OrderStatus.CONFIRMED: {
                OrderStatus.PROCESSING,
                OrderStatus.CANCELLED
            },
            OrderStatus.PROCESSING: {
                OrderStatus.SHIPPED,
                OrderStatus.CANCELLED
            },
            OrderStatus.SHIPPED: {
                OrderStatus.DELIVERED
            },
            OrderStatus.DELIVERED: set(),
            OrderStatus.CANCELLED: set()
        }

    def can_transition(
        self,
        current_status: OrderStatus,
        new_status: OrderStatus
    ) -> bool:
        """
        Check if transition is valid

        Args:
            current_status: Current order status
            new_status: Desired new status

        Returns:
            True if transition is allowed
        """
        return new_status in self.transitions.get(current_status, set())

    def get_valid_transitions(self, current_status: OrderStatus) -> List[OrderStatus]:
        """Statuses reachable from ``current_status`` in one step"""
        order = list(OrderStatus)
        return sorted(self.transitions.get(current_status, set()), key=order.index)

    def is_terminal_state(self, status: OrderStatus) -> bool:
        return len(self.transitions.get(status, set())) == 0

    def is_cancellable(self, status: OrderStatus) -> bool:
        """
        Check if order can be cancelled in current status

        Args:
            status: Current order status

        Returns:
            True if order can be cancelled
        """
        return OrderStatus.CANCELLED in self.transitions.get(status, set())
