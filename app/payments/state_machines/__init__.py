"""
State enums and reconciliation for Airwallex payments.

The reconciler lives in payments.state_machines.reconciler and is not
re-exported here, so payments.types can import the enums without a cycle.
"""

from payments.state_machines.states import (
    AttemptStatus,
    IntentStatus,
    PaymentState,
)

__all__ = [
    "AttemptStatus",
    "IntentStatus",
    "PaymentState",
]
