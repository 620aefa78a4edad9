"""
Data Models Package

This package contains all Pydantic models used in SpendMate.
All data flowing through the system must conform to these schemas.
"""

from spendmate.models.expense import (
    ALL_CATEGORIES,
    BudgetUsage,
    CategoryBudgets,
    CategoryFilter,
    CategoryTotal,
    ExpenseCategory,
    ExpenseForm,
    ExpenseRecord,
    ExpenseStats,
    FilterState,
    ReceiptData,
    SortOrder,
    Theme,
    ValidationIssue,
    ValidationResult,
    to_money,
)
from spendmate.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "ALL_CATEGORIES",
    "BudgetUsage",
    "CategoryBudgets",
    "CategoryFilter",
    "CategoryTotal",
    "ExpenseCategory",
    "ExpenseForm",
    "ExpenseRecord",
    "ExpenseStats",
    "FilterState",
    "ReceiptData",
    "SortOrder",
    "Theme",
    "ValidationIssue",
    "ValidationResult",
    "to_money",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
