"""
TILIN Ops - Order State Machine

States:
    PENDING -> IN_PROGRESS -> READY -> COMPLETED (terminal)
    REFUNDED reachable from any non-terminal state via refund

Rules:
    - Transitions are strictly forward
    - advance() is a pure function of the current state
"""

from tilin_ops.models.sales import SaleStatus


class InvalidTransition(ValueError):
    """Requested transition is not allowed from the current state."""
    pass


# current_state -> single valid next state
NEXT_STATUS: dict[SaleStatus, SaleStatus] = {
    SaleStatus.PENDING: SaleStatus.IN_PROGRESS,
    SaleStatus.IN_PROGRESS: SaleStatus.READY,
    SaleStatus.READY: SaleStatus.COMPLETED,
}

TERMINAL_STATUSES = frozenset({SaleStatus.COMPLETED, SaleStatus.REFUNDED})

# Orders still occupying the kitchen line
ACTIVE_LOAD_STATUSES = (SaleStatus.PENDING, SaleStatus.IN_PROGRESS)

# Orders shown on the board
BOARD_STATUSES = (SaleStatus.PENDING, SaleStatus.IN_PROGRESS, SaleStatus.READY)


def advance(status: SaleStatus) -> SaleStatus:
    """
    Next status on the kitchen line.

    Raises:
        InvalidTransition: If status is COMPLETED or REFUNDED
    """
    try:
        return NEXT_STATUS[SaleStatus(status)]
    except (KeyError, ValueError):
        raise InvalidTransition(f"Cannot advance order in status {status}")


def refund(status: SaleStatus) -> SaleStatus:
    """
    Mark an order refunded.

    Raises:
        InvalidTransition: If the order is already terminal
    """
    try:
        current = SaleStatus(status)
    except ValueError:
        raise InvalidTransition(f"Unknown order status {status}")
    if current in TERMINAL_STATUSES:
        raise InvalidTransition(f"Cannot refund order in status {status}")
    return SaleStatus.REFUNDED
