# =============================================================================
# core/models/credit.py - Credit Ledger Types
# =============================================================================
# Members hold three independent credit balances. Each has its own ledger of
# transactions: purchases and top-ups are positive, bookings negative.
# =============================================================================

from enum import Enum


class CreditType(str, Enum):
    """Which credit ledger to read."""
    CIRCUITS = "circuits"
    PT = "pt"
    PARTNER_PT = "partner-pt"

    @property
    def ledger_table(self) -> str:
        return LEDGER_TABLES[self]


LEDGER_TABLES = {
    CreditType.CIRCUITS: "credit_transactions",
    CreditType.PT: "pt_credit_transactions",
    CreditType.PARTNER_PT: "joint_pt_credit_transactions",
}
