"""Channel, event and entity name catalogs.

Symbolic names for the string values producers and consumers pass around,
so callers never hard-code literal channel names.  The catalogs are static
and read-only.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Channel(str, Enum):
    """Channels a router can publish on or subscribe to."""

    ALL = "all"  # reserved: receives a copy of every publish
    APP = "app"
    MEDICAL = "medical"
    FINANCE = "finance"
    INVENTORY = "inventory"
    ADMIN = "administration"


class Event(str, Enum):
    """What happened."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    REPORT = "report"
    LOGIN = "login"
    RELOAD = "reload"
    LOGOUT = "logout"
    SEARCH = "search"


class Entity(str, Enum):
    """What it happened to."""

    PATIENT = "patient"
    INVOICE = "invoice"
    PAYMENT = "payment"
    VOUCHER = "voucher"
    PATIENT_GROUP = "patient group"
    DEBTOR_GROUP = "debtor_group"
    EMPLOYEE = "employee"
    USER = "user"
    SERVICE = "service"
    SUPPLIER = "supplier"
    PERMISSION = "permission"
    LOCATION = "location"
    CASHBOX = "cashbox"


def _as_mapping(enum_cls: type[Enum]) -> Mapping[str, str]:
    return MappingProxyType({member.name: member.value for member in enum_cls})


CHANNELS: Mapping[str, str] = _as_mapping(Channel)
EVENTS: Mapping[str, str] = _as_mapping(Event)
ENTITIES: Mapping[str, str] = _as_mapping(Entity)

# The reserved broadcast channel as a plain string.
ALL_CHANNEL: str = Channel.ALL.value
