"""
Admission rules for ticket requests.

Pure functions: the outcome depends only on the request and the configured
VIP access code.
"""

import hmac
from collections.abc import Mapping
from typing import Any

from turn_dispatch.constants import (
    MAX_AGE,
    MIN_AGE,
    PRIORITY_MIN_AGE,
    TicketClass,
)
from turn_dispatch.errors import (
    InvalidAge,
    InvalidClass,
    InvalidName,
    MissingField,
    PriorityAgeTooLow,
    VipCredentialRejected,
)
from turn_dispatch.types.ticket import TicketInput

REQUIRED_FIELDS = ("name", "age", "type")


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def check_present(request: Any) -> None:
    """
    Raise MissingField listing every required field that is absent or empty.

    A request that is not a JSON object at all is missing every field.
    """
    if not isinstance(request, Mapping):
        raise MissingField(list(REQUIRED_FIELDS))
    missing = [f for f in REQUIRED_FIELDS if _is_blank(request.get(f))]
    if missing:
        raise MissingField(missing)


def normalize_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidName()
    return value.strip()


def normalize_age(value: Any) -> int:
    """
    Coerce an age to int.

    Booleans and strings are rejected even though Python would happily
    convert them. Integral floats such as 70.0 are accepted.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidAge()
    if isinstance(value, float) and not value.is_integer():
        raise InvalidAge()
    age = int(value)
    if not MIN_AGE <= age <= MAX_AGE:
        raise InvalidAge()
    return age


def parse_ticket_class(value: Any) -> TicketClass:
    allowed = [c.value for c in TicketClass]
    if not isinstance(value, str) or value not in allowed:
        raise InvalidClass(allowed)
    return TicketClass(value)


def check_vip_code(vip_code: str | None, vip_access_code: str) -> None:
    if vip_code is None or not hmac.compare_digest(
        vip_code.encode("utf-8"), vip_access_code.encode("utf-8")
    ):
        raise VipCredentialRejected()


def validate_ticket_request(
    request: Any,
    *,
    vip_code: str | None,
    vip_access_code: str,
) -> TicketInput:
    """
    Validate a raw ticket request.

    Checks run in order and stop at the first failure: presence, name, age,
    class, priority age, VIP code.

    Args:
        request: Raw request body, normally a mapping of `name`, `age`
            and `type`.
        vip_code: Credential supplied with the request, if any.
        vip_access_code: The configured shared VIP secret.

    Returns:
        TicketInput with trimmed name, integer age and parsed class.

    Raises:
        ValidationError: One of its subclasses, naming the broken rule.
    """
    check_present(request)
    name = normalize_name(request["name"])
    age = normalize_age(request["age"])
    ticket_class = parse_ticket_class(request["type"])

    if ticket_class is TicketClass.PRIORITY and age <= PRIORITY_MIN_AGE:
        raise PriorityAgeTooLow(PRIORITY_MIN_AGE)

    if ticket_class is TicketClass.VIP:
        check_vip_code(vip_code, vip_access_code)

    return TicketInput(name=name, age=age, ticket_class=ticket_class)
