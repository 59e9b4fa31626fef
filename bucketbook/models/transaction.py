from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Transaction:
    id: str
    type: str               # 'expense' | 'income' | 'investment'
    amount: float
    description: str
    date: str               # 'YYYY-MM-DD'
    is_recurring: bool = False
    bucket_id: Optional[str] = None
    recurring_id: Optional[str] = None   # lookup only; the template does not own the row
    tags: list[str] = field(default_factory=list)
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
