from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class RunState:
    balance: Decimal = Decimal("0")
    last_opened_date: Optional[date] = None
    last_reset_month: int = 0            # 1-12, 0 = never reset
    starting_budget_of_month: Decimal = Decimal("0")
    next_month_budget: Optional[Decimal] = None
    has_launched_before: bool = False
