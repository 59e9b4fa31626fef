from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union


class TransactionType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"
    INVESTMENT = "investment"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class _SkeletonFields:
    amount: float
    description: str
    bucket_id: Optional[str] = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    notes: Optional[str] = None


@dataclass(frozen=True)
class ExpenseSkeleton(_SkeletonFields):
    type: ClassVar[TransactionType] = TransactionType.EXPENSE


@dataclass(frozen=True)
class IncomeSkeleton(_SkeletonFields):
    type: ClassVar[TransactionType] = TransactionType.INCOME


@dataclass(frozen=True)
class InvestmentSkeleton(_SkeletonFields):
    type: ClassVar[TransactionType] = TransactionType.INVESTMENT


TransactionSkeleton = Union[ExpenseSkeleton, IncomeSkeleton, InvestmentSkeleton]

_SKELETON_TYPES: dict[TransactionType, type] = {
    TransactionType.EXPENSE: ExpenseSkeleton,
    TransactionType.INCOME: IncomeSkeleton,
    TransactionType.INVESTMENT: InvestmentSkeleton,
}


def make_skeleton(
    type_,
    amount,
    description: str,
    bucket_id: Optional[str] = None,
    tags=None,
    notes: Optional[str] = None,
) -> TransactionSkeleton:
    """Validate loose input and build the matching skeleton variant."""
    try:
        tx_type = TransactionType(type_)
    except ValueError:
        raise ValueError(
            'Type must be "expense", "income", or "investment".'
        ) from None
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise ValueError("Amount must be a number.") from None
    if amount <= 0:
        raise ValueError("Amount must be positive.")
    if not isinstance(description, str) or not description.strip():
        raise ValueError("Description cannot be empty.")
    return _SKELETON_TYPES[tx_type](
        amount=amount,
        description=description,
        bucket_id=bucket_id or None,
        tags=tuple(tags or ()),
        notes=notes or None,
    )


@dataclass
class RecurringTemplate:
    id: str
    skeleton: TransactionSkeleton
    frequency: Frequency
    start_date: str         # 'YYYY-MM-DD', the permanent day/month anchor
    end_date: Optional[str] = None      # inclusive
    last_applied: Optional[str] = None  # watermark
    created_at: str = ""

    @property
    def type(self) -> TransactionType:
        return self.skeleton.type
