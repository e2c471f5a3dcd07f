"""Enumeration types for lending policies."""

from enum import Enum


class PolicyType(str, Enum):
    PERSONAL = "personal"
    BUSINESS = "business"
    ECO_FRIENDLY = "eco-friendly"


class Currency(str, Enum):
    STX = "STX"
    USD = "USD"
    BTC = "BTC"
