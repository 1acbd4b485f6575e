from enum import Enum


class PaymentStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"


ALLOWED_TRANSITIONS = {
    PaymentStatus.pending: [PaymentStatus.completed, PaymentStatus.failed],
    PaymentStatus.failed: [PaymentStatus.completed],
    PaymentStatus.completed: [],
}

# Rows in these states are replaced when the same chapter is ordered again
STALE_STATUSES = [PaymentStatus.pending.value, PaymentStatus.failed.value]


def can_transition(current: str, target: str) -> bool:
    return PaymentStatus(target) in ALLOWED_TRANSITIONS[PaymentStatus(current)]
