from __future__ import annotations

from typing import Optional, Protocol

from .model import Customer


class CustomerRepository(Protocol):
    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        raise NotImplementedError
