"""The lexical grammar of Uniform Resource Names.

`RFC 8141 <https://www.rfc-editor.org/rfc/rfc8141>`_ defines the URN syntax as
an ABNF grammar. This module operationalizes the parts of it that are needed
for validation, as a small set of precompiled regular expressions.

.. code-block::

    namestring    = assigned-name [ rq-components ] [ "#" f-component ]
    assigned-name = "urn" ":" NID ":" NSS
    NID           = (alphanum) 0*30(ldh) (alphanum)
    rq-components = [ "?+" r-component ] [ "?=" q-component ]

The patterns are matched case-insensitively and restricted to ASCII, so that
Unicode case folding (e.g., of the Kelvin sign) can never pass as a letter.
"""

from __future__ import annotations

import re
from typing import NamedTuple

__all__ = [
    "COMPONENT_PATTERN",
    "NID_PATTERN",
    "NSS_PATTERN",
    "PERCENT_ENCODED_PATTERN",
    "URN_PATTERN",
    "URNMatch",
    "is_component",
    "is_nid",
    "is_nss",
    "match_urn",
    "normalize_percent_encoding",
]

_FLAGS = re.IGNORECASE | re.ASCII

NID_PATTERN = r"[0-9a-z][0-9a-z\-]{0,30}[0-9a-z]"
"""A regex for namespace identifiers (NIDs).

NIDs are between 2 and 32 characters long, made of letters, digits and
hyphens, and can neither start nor end with a hyphen.
"""

NSS_PATTERN = r"[0-9a-z\-._~*+=%$&@'()!,:;/]+"
"""A regex for namespace specific strings (NSSs)."""

COMPONENT_PATTERN = r"[0-9a-z\-._~*+=%$&@'()!,:;/]*"
"""A regex for the r-, q-, and f-components, which share the NSS alphabet but can be empty."""

URN_PATTERN = (
    rf"urn:({NID_PATTERN}):({NSS_PATTERN})"
    rf"(?:\?\+({COMPONENT_PATTERN}))?"
    rf"(?:\?=({COMPONENT_PATTERN}))?"
    rf"(?:#({COMPONENT_PATTERN}))?"
)
"""A regex for a full URN.

The optional components can each appear at most once and only in the order
r-component (``?+``), q-component (``?=``), f-component (``#``).
"""

PERCENT_ENCODED_PATTERN = r"%[0-9a-f]{2}"
"""A regex for a percent-encoded octet."""

NID_RE = re.compile(NID_PATTERN, _FLAGS)
NSS_RE = re.compile(NSS_PATTERN, _FLAGS)
COMPONENT_RE = re.compile(COMPONENT_PATTERN, _FLAGS)
URN_RE = re.compile(URN_PATTERN, _FLAGS)
PERCENT_ENCODED_RE = re.compile(PERCENT_ENCODED_PATTERN, _FLAGS)


class URNMatch(NamedTuple):
    """The parts of a string that matched :data:`URN_PATTERN`.

    Optional components are ``None`` if their marker did not appear at all.
    """

    nid: str
    nss: str
    r_component: str | None
    q_component: str | None
    f_component: str | None


def is_nid(nid: str) -> bool:
    """Return if the string is a valid namespace identifier.

    >>> is_nid("isbn")
    True
    >>> is_nid("IETF")
    True

    NIDs can't end with a hyphen, and can't contain underscores

    >>> is_nid("no-end-dash-")
    False
    >>> is_nid("under_scored")
    False
    """
    return NID_RE.fullmatch(nid) is not None


def is_nss(nss: str) -> bool:
    """Return if the string is a valid namespace specific string.

    >>> is_nss("rfc:8141")
    True
    >>> is_nss("")
    False
    >>> is_nss("no spaces allowed")
    False
    """
    return NSS_RE.fullmatch(nss) is not None


def is_component(component: str) -> bool:
    """Return if the string is a valid r-, q-, or f-component.

    :param component: A string
    :return: If the string only contains characters allowed in URN components.

    Unlike the NSS, components are allowed to be empty.

    >>> is_component("section-3")
    True
    >>> is_component("")
    True
    >>> is_component("no spaces in component")
    False
    """
    return COMPONENT_RE.fullmatch(component) is not None


def match_urn(s: str) -> URNMatch | None:
    """Match a string against the full URN grammar.

    :param s: A string
    :return: The matched parts, or None if the string isn't a URN

    >>> match_urn("urn:ietf:rfc:8141#section-3")
    URNMatch(nid='ietf', nss='rfc:8141', r_component=None, q_component=None, f_component='section-3')

    Components that appear out of order don't match

    >>> match_urn("urn:ietf:rfc:8141#section-3?=q") is None
    True
    """
    match = URN_RE.fullmatch(s)
    if match is None:
        return None
    return URNMatch(*match.groups())


def _upper(match: re.Match[str]) -> str:
    return match.group(0).upper()


def normalize_percent_encoding(nss: str) -> str:
    """Upper-case the hexadecimal digits of all percent-encoded octets.

    :param nss: A namespace specific string
    :return: The string with every ``%xx`` triplet upper-cased, everything else untouched

    >>> normalize_percent_encoding("a123%2cz456")
    'a123%2Cz456'
    >>> normalize_percent_encoding("ABC%7e")
    'ABC%7E'
    """
    if "%" not in nss:
        return nss
    return PERCENT_ENCODED_RE.sub(_upper, nss)
