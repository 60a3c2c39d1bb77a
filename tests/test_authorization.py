import pytest

from legalmatters.authorization import (
    AccessDecision,
    Principal,
    decide_customer_access,
    ensure_customer_access,
)
from legalmatters.exceptions import AuthenticationError, AuthorizationError
from legalmatters.models import User, UserRole

ADMIN = Principal(id=1, email="admin@legalmatters.com", firm_name="Admin", role=UserRole.ADMIN)
ALICE = Principal(id=2, email="alice@smithlaw.com", firm_name="Smith Law", role=UserRole.LAWYER)
BOB = Principal(id=3, email="bob@jonesllp.com", firm_name="Jones LLP", role=UserRole.LAWYER)


@pytest.mark.parametrize(
    "principal, lawyer_id, expected",
    [
        (None, 2, AccessDecision.UNAUTHENTICATED),
        (ADMIN, 2, AccessDecision.ALLOW),
        (ADMIN, 1, AccessDecision.ALLOW),
        (ALICE, 2, AccessDecision.ALLOW),
        (BOB, 2, AccessDecision.FORBIDDEN),
        (ALICE, 3, AccessDecision.FORBIDDEN),
    ],
)
def test_decision_table(principal, lawyer_id, expected):
    assert decide_customer_access(principal, lawyer_id) == expected


def test_ensure_access_raises_distinct_errors():
    with pytest.raises(AuthenticationError):
        ensure_customer_access(None, customer_id=10, lawyer_id=2)
    with pytest.raises(AuthorizationError) as excinfo:
        ensure_customer_access(BOB, customer_id=10, lawyer_id=2, action="delete")
    assert excinfo.value.status_code == 403
    assert "delete" in excinfo.value.message
    assert ensure_customer_access(ALICE, customer_id=10, lawyer_id=2) is None


def test_principal_from_user():
    user = User(id=7, email="carol@lawco.com", firm_name="LawCo", role=UserRole.LAWYER)
    principal = Principal.from_user(user)
    assert principal.id == 7
    assert principal.is_admin is False
    assert Principal.from_user(User(id=1, email="a@b.com", firm_name="X", role=UserRole.ADMIN)).is_admin
