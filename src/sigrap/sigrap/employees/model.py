from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    """Domain entity: the staff member who processes a sale or return.

    Note: Plain data object (no DB access code).
    """

    employee_id: int
    full_name: str
    username: str
    is_active: bool = True
