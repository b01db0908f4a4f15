# usedbooks/domain/context.py
from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Uwierzytelniony uzytkownik biezacego requestu."""

    user_id: str
    is_admin: bool = False
