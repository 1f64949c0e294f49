"""Parsing, validation, and equivalence of Uniform Resource Names (RFC 8141)."""

from .api import (
    URN,
    ContractViolation,
    InvalidComponent,
    InvalidNID,
    InvalidNSS,
    InvalidURN,
    URNError,
    URNOptions,
    new,
    parse,
    validates,
)
from .grammar import is_component
from .version import get_version

__all__ = [
    "URN",
    "URNOptions",
    "new",
    "parse",
    "validates",
    "is_component",
    "get_version",
    # errors
    "URNError",
    "InvalidNID",
    "InvalidNSS",
    "InvalidComponent",
    "InvalidURN",
    "ContractViolation",
]
