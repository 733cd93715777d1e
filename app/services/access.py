"""Role-scoped data access: which donors and donations a caller may see or modify.

Each role is a scope class carrying its own filtering rules, so call sites never
branch on the role string themselves.

Note the asymmetry kept from the product rules: a leader's donor *search* is limited
to donors they registered, while donation visibility, recent donations and
statistics for a leader are limited by the donor's province.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from app.core.errors import Forbidden
from app.models import ROLE_ADMIN, ROLE_LEADER, Donor

if TYPE_CHECKING:
    from app.models import User
    from app.schemas.auth import CurrentUser

DonorAction = Literal["edit", "delete"]

_VERBS: dict[str, str] = {"edit": "editar", "delete": "eliminar"}


class AccessScope:
    """Base scope; use scope_for() to build the right variant for a user."""

    role: str = ""

    def __init__(self, user_id: str, province_id: str) -> None:
        self.user_id = user_id
        self.province_id = province_id

    @property
    def is_admin(self) -> bool:
        return False

    def donor_search_conditions(self, province_id: str | None = None) -> list[Any]:
        raise NotImplementedError

    def donor_stats_conditions(self, province_id: str | None = None) -> list[Any]:
        raise NotImplementedError

    def donation_conditions(self) -> list[Any]:
        """Conditions on Donor (joined to Donation) restricting visible donations."""
        raise NotImplementedError

    def ensure_can_modify_donor(self, donor: Donor, action: DonorAction = "edit") -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(user_id={self.user_id!r}, province_id={self.province_id!r})"


class AdminScope(AccessScope):
    """Admins see every province unless they narrow to one; they modify donors of their own province."""

    role = ROLE_ADMIN

    @property
    def is_admin(self) -> bool:
        return True

    def donor_search_conditions(self, province_id: str | None = None) -> list[Any]:
        if province_id:
            return [Donor.province_id == province_id]
        return []

    def donor_stats_conditions(self, province_id: str | None = None) -> list[Any]:
        return self.donor_search_conditions(province_id)

    def donation_conditions(self) -> list[Any]:
        return []

    def ensure_can_modify_donor(self, donor: Donor, action: DonorAction = "edit") -> None:
        if donor.province_id != self.province_id:
            raise Forbidden(f"Só pode {_VERBS[action]} doadores da sua província")


class LeaderScope(AccessScope):
    """Leaders search and modify only the donors they registered."""

    role = ROLE_LEADER

    def donor_search_conditions(self, province_id: str | None = None) -> list[Any]:
        # Caller-supplied province filters never widen a leader's view.
        return [Donor.created_by == self.user_id]

    def donor_stats_conditions(self, province_id: str | None = None) -> list[Any]:
        return [Donor.province_id == self.province_id]

    def donation_conditions(self) -> list[Any]:
        return [Donor.province_id == self.province_id]

    def ensure_can_modify_donor(self, donor: Donor, action: DonorAction = "edit") -> None:
        if donor.created_by != self.user_id:
            raise Forbidden(f"Só pode {_VERBS[action]} doadores que cadastrou")


_SCOPES: dict[str, type[AccessScope]] = {
    ROLE_ADMIN: AdminScope,
    ROLE_LEADER: LeaderScope,
}


def scope_for(user: User | CurrentUser) -> AccessScope:
    """Build the scope for a user record (or the authenticated caller). Unknown roles are refused."""
    scope_cls = _SCOPES.get(user.role)
    if scope_cls is None:
        raise Forbidden()
    return scope_cls(user_id=user.id, province_id=user.province_id)
