from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, as vouched for by the identity provider."""

    employee_id: int
    role: Role

    @property
    def is_ceo(self) -> bool:
        return self.role == Role.CEO
