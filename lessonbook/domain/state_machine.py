# lessonbook/domain/state_machine.py

from enum import Enum
from typing import ClassVar, Dict, Set, Type

from lessonbook.domain.exceptions import InvalidStateTransitionError


class OrderStatus(str, Enum):
    IDLE = "IDLE"
    SUBMITTING = "SUBMITTING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class SearchStatus(str, Enum):
    IDLE = "IDLE"
    PENDING = "PENDING"
    FETCHING = "FETCHING"


class StateMachine:
    """
    Table-driven lifecycle controller.
    Subclasses declare the status type and the legal transitions.
    """

    _STATUS_TYPE: ClassVar[Type[Enum]]
    _ALLOWED_TRANSITIONS: ClassVar[Dict[Enum, Set[Enum]]]

    @classmethod
    def can_transition(cls, from_status: Enum, to_status: Enum) -> bool:
        """
        Returns True if transition is allowed.
        """
        cls._ensure_valid_status(from_status)
        cls._ensure_valid_status(to_status)

        return to_status in cls._ALLOWED_TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: Enum, to_status: Enum) -> None:
        """
        Raises InvalidStateTransitionError if transition is illegal.
        """
        if not cls.can_transition(from_status, to_status):
            raise InvalidStateTransitionError(
                from_state=from_status.value,
                to_state=to_status.value,
            )

    @classmethod
    def get_allowed_transitions(cls, status: Enum) -> Set[Enum]:
        """
        Returns allowed next states from current state.
        """
        cls._ensure_valid_status(status)
        return cls._ALLOWED_TRANSITIONS.get(status, set())

    @classmethod
    def _ensure_valid_status(cls, status: Enum) -> None:
        if not isinstance(status, cls._STATUS_TYPE):
            raise TypeError(
                f"Expected {cls._STATUS_TYPE.__name__}, got {type(status)}"
            )


class OrderStateMachine(StateMachine):
    """
    Order submission lifecycle.
    A finished submission (either outcome) may be followed by a new one.
    """

    _STATUS_TYPE = OrderStatus
    _ALLOWED_TRANSITIONS = {
        OrderStatus.IDLE: {
            OrderStatus.SUBMITTING,
        },
        OrderStatus.SUBMITTING: {
            OrderStatus.SUCCEEDED,
            OrderStatus.FAILED,
        },
        OrderStatus.SUCCEEDED: {
            OrderStatus.SUBMITTING,
        },
        OrderStatus.FAILED: {
            OrderStatus.SUBMITTING,
        },
    }


class SearchStateMachine(StateMachine):
    """
    Search debouncer lifecycle.
    PENDING re-enters itself when the timer is re-armed and FETCHING
    yields to PENDING when the user keeps typing during a request.
    """

    _STATUS_TYPE = SearchStatus
    _ALLOWED_TRANSITIONS = {
        SearchStatus.IDLE: {
            SearchStatus.PENDING,
            SearchStatus.IDLE,
        },
        SearchStatus.PENDING: {
            SearchStatus.PENDING,
            SearchStatus.FETCHING,
            SearchStatus.IDLE,
        },
        SearchStatus.FETCHING: {
            SearchStatus.PENDING,
            SearchStatus.FETCHING,
            SearchStatus.IDLE,
        },
    }
