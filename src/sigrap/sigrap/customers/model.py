from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import CustomerStatus


@dataclass(frozen=True)
class Customer:
    customer_id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    status: CustomerStatus = CustomerStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
