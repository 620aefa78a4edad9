"""
Core Data Models for SpendMate

These models define the schemas for all data flowing through the tracker.
They are designed to:
1. Enforce type safety at runtime
2. Normalize values coming back from storage (category fallback, 2dp amounts)
3. Be serializable for the key-value store and for exports

DESIGN DECISION: Amounts are Decimal, quantized to two places on the way in.
Everything that compares or renders an amount sees the same two-decimal figure.
"""

import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Literal, Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Convert a number-like value to a two-decimal Decimal."""
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    try:
        amount = Decimal(str(value).strip()).quantize(CENTS)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: A closed list keeps charts and budgets consistent.
    Anything we don't recognise becomes OTHER.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    TRAVEL = "Travel"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    SHOPPING = "Shopping"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value) -> "ExpenseCategory":
        """Map any value onto a category, falling back to OTHER."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for category in cls:
                if category.value.lower() == wanted:
                    return category
        return cls.OTHER


class SortOrder(str, Enum):
    """Sort keys offered by the expense list."""
    NEWEST = "newest"
    OLDEST = "oldest"
    HIGHEST = "highest"
    LOWEST = "lowest"


class Theme(str, Enum):
    """UI theme preference."""
    LIGHT = "light"
    DARK = "dark"


ALL_CATEGORIES = "All"

CategoryFilter = Union[Literal["All"], ExpenseCategory]

CategoryBudgets = dict[ExpenseCategory, Decimal]


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    One logged expense.

    The id is assigned once and can never be reassigned.
    Edits replace the whole record; bulk recategorization
    copies the record with a new category.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    id: UUID = Field(
        default_factory=uuid4,
        frozen=True,
        description="Unique, stable expense ID"
    )
    merchant: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Where the money was spent"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Amount spent"
    )
    date: datetime.date = Field(
        ...,
        description="Date of the purchase"
    )
    category: ExpenseCategory = Field(
        default=ExpenseCategory.OTHER,
        description="Expense category"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-text notes"
    )
    is_recurring: bool = Field(
        default=False,
        alias="isRecurring",
        description="Informational flag only; nothing is auto-generated"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def quantize_amount(cls, v):
        return to_money(v)

    @field_validator('category', mode='before')
    @classmethod
    def fallback_category(cls, v):
        """Unknown or missing categories become OTHER."""
        return ExpenseCategory.coerce(v)

    @field_validator('is_recurring', mode='before')
    @classmethod
    def missing_flag_is_false(cls, v):
        return False if v is None else v

    def to_storage_dict(self) -> dict:
        """Serialize for the key-value store (camelCase flag, ISO date)."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# RECEIPT MODELS
# =============================================================================

class ReceiptData(BaseModel):
    """
    What the receipt scanner thinks it saw.

    CRITICAL: This is PROPOSED data. It only pre-fills the entry form;
    nothing is saved until the user submits it.
    Amount may be 0 when the scanner could not read it.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    merchant: str = Field(
        default="Unknown Merchant",
        min_length=1,
        max_length=200,
    )
    amount: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        decimal_places=2,
    )
    date: datetime.date = Field(default_factory=datetime.date.today)
    category: ExpenseCategory = ExpenseCategory.OTHER

    @field_validator('amount', mode='before')
    @classmethod
    def quantize_amount(cls, v):
        return to_money(v)

    @field_validator('category', mode='before')
    @classmethod
    def fallback_category(cls, v):
        return ExpenseCategory.coerce(v)


# =============================================================================
# ENTRY FORM MODELS
# =============================================================================

class ExpenseForm(BaseModel):
    """
    Raw values from the add/edit form.

    Everything is optional here - the validator decides what is missing.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    merchant: str = ""
    amount: Optional[Decimal] = None
    date: Optional[datetime.date] = None
    category: ExpenseCategory = ExpenseCategory.FOOD
    notes: str = ""
    is_recurring: bool = False

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "ExpenseForm":
        """Pre-fill the form for editing an existing expense."""
        return cls(
            merchant=record.merchant,
            amount=record.amount,
            date=record.date,
            category=record.category,
            notes=record.notes or "",
            is_recurring=record.is_recurring,
        )

    @classmethod
    def from_receipt(cls, receipt: ReceiptData) -> "ExpenseForm":
        """Pre-fill the form from scanned receipt data."""
        return cls(
            merchant=receipt.merchant,
            amount=receipt.amount,
            date=receipt.date,
            category=receipt.category,
            notes="Scanned from receipt",
        )


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating a manual entry."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def error_fields(self) -> list[str]:
        return [issue.field for issue in self.issues if issue.severity == "error"]


# =============================================================================
# QUERY MODELS
# =============================================================================

class FilterState(BaseModel):
    """Filters applied to the expense list."""

    search: str = ""
    category: CategoryFilter = ALL_CATEGORIES
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    sort_order: SortOrder = SortOrder.NEWEST


class CategoryTotal(BaseModel):
    """Amount spent in one category."""

    category: ExpenseCategory
    total: Decimal


class BudgetUsage(BaseModel):
    """
    How much of a budget has been used.

    percentage is None when there is no limit set.
    """

    spent: Decimal
    limit: Optional[Decimal] = None
    percentage: Optional[float] = None
    is_over_budget: bool = False

    @property
    def has_limit(self) -> bool:
        return self.limit is not None


class ExpenseStats(BaseModel):
    """Summary statistics derived from the full expense list."""

    total: Decimal = Decimal("0")
    count: int = 0
    average: Decimal = Decimal("0")
    category_totals: list[CategoryTotal] = Field(
        default_factory=list,
        description="Per-category totals, largest first"
    )
    month_totals: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Short month label -> total, in first-seen order"
    )

    @property
    def highest_category(self) -> str:
        if not self.category_totals:
            return "N/A"
        return self.category_totals[0].category.value

    def category_total_map(self) -> dict[ExpenseCategory, Decimal]:
        return {entry.category: entry.total for entry in self.category_totals}
