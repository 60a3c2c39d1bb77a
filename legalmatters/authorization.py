"""
Customer access policy ("Admin or Owner").

A principal may act on a customer, and on every matter of that customer, when
it is an Admin or when it is the customer's lawyer. Callers resolve the
customer first: a customer that does not exist is a not-found outcome, never
an authorization failure.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from legalmatters.exceptions import AuthenticationError, AuthorizationError
from legalmatters.models import User, UserRole

logger = logging.getLogger(__name__)


class AccessDecision(str, enum.Enum):
    ALLOW = "allow"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Principal:
    """The authenticated user a request acts on behalf of."""

    id: int
    email: str
    firm_name: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, email=user.email, firm_name=user.firm_name, role=UserRole(user.role))


def decide_customer_access(principal: Optional[Principal], lawyer_id: int) -> AccessDecision:
    if principal is None:
        return AccessDecision.UNAUTHENTICATED
    if principal.is_admin:
        return AccessDecision.ALLOW
    if lawyer_id == principal.id:
        return AccessDecision.ALLOW
    return AccessDecision.FORBIDDEN


def ensure_customer_access(
    principal: Optional[Principal],
    customer_id: int,
    lawyer_id: int,
    action: str = "access",
) -> None:
    """Raise the domain error matching a non-ALLOW decision."""
    decision = decide_customer_access(principal, lawyer_id)
    if decision == AccessDecision.UNAUTHENTICATED:
        raise AuthenticationError()
    if decision == AccessDecision.FORBIDDEN:
        logger.warning(
            "Access denied: user %s tried to %s customer %s owned by %s",
            principal.id, action, customer_id, lawyer_id,
        )
        raise AuthorizationError(f"You are not authorized to {action} this customer")
