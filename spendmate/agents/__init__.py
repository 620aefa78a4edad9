"""AI Agents package."""

from spendmate.agents.ai_agents import (
    EMPTY_INSIGHT_MESSAGE,
    INSIGHT_FAILURE_MESSAGE,
    NO_EXPENSES_MESSAGE,
    RECEIPT_FAILURE_MESSAGE,
    UNKNOWN_MERCHANT,
    InsightAgent,
    ReceiptAgent,
    ReceiptParseError,
)

__all__ = [
    "EMPTY_INSIGHT_MESSAGE",
    "INSIGHT_FAILURE_MESSAGE",
    "NO_EXPENSES_MESSAGE",
    "RECEIPT_FAILURE_MESSAGE",
    "UNKNOWN_MERCHANT",
    "InsightAgent",
    "ReceiptAgent",
    "ReceiptParseError",
]
