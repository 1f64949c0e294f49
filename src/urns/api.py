"""Data structures and algorithms for :mod:`urns`."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import core_schema

from .grammar import is_component, is_nid, is_nss, match_urn, normalize_percent_encoding

__all__ = [
    "URN",
    "ContractViolation",
    "InvalidComponent",
    "InvalidNID",
    "InvalidNSS",
    "InvalidURN",
    "URNError",
    "URNOptions",
    "new",
    "parse",
    "validates",
]

logger = logging.getLogger(__name__)


class URNError(ValueError):
    """An error raised on invalid input to the URN constructor or parser."""


class InvalidNID(URNError):
    """An error raised when a namespace identifier doesn't match the NID grammar."""

    def __init__(self, nid: str) -> None:
        """Initialize the error."""
        self.nid = nid

    def __str__(self) -> str:
        return "invalid namespace identifier (NID)"


class InvalidNSS(URNError):
    """An error raised when a namespace specific string doesn't match the NSS grammar."""

    def __init__(self, nss: str) -> None:
        """Initialize the error."""
        self.nss = nss

    def __str__(self) -> str:
        return "invalid namespace specific string (NSS)"


class InvalidComponent(URNError):
    """An error raised when an r-, q-, or f-component contains illegal characters."""

    def __init__(self, kind: str, component: str) -> None:
        """Initialize the error.

        :param kind: One of ``r-component``, ``q-component``, or ``f-component``
        :param component: The rejected value
        """
        self.kind = kind
        self.component = component

    def __str__(self) -> str:
        return f"invalid {self.kind}"


class InvalidURN(URNError):
    """An error raised when a string doesn't match the URN grammar at all."""

    def __init__(self, value: str) -> None:
        """Initialize the error."""
        self.value = value

    def __str__(self) -> str:
        return f"invalid URN: {self.value}"


class ContractViolation(RuntimeError):
    """An error raised when the API is used incorrectly.

    This is not a subclass of :class:`ValueError` on purpose, so it doesn't
    get caught by code handling invalid input.
    """


class URNOptions(BaseModel):
    """Configuration for :func:`new` and :func:`parse`.

    >>> URNOptions(fragment="section-3").has_components
    True
    >>> URNOptions(preserve_case=True).has_components
    False
    """

    resolution: str | None = Field(None, description="The r-component, introduced by ``?+``.")
    query: str | None = Field(None, description="The q-component, introduced by ``?=``.")
    fragment: str | None = Field(None, description="The f-component, introduced by ``#``.")
    preserve_case: bool = Field(
        False, description="If true, the namespace identifier is not lower-cased."
    )

    model_config = ConfigDict(frozen=True)

    @property
    def has_components(self) -> bool:
        """Get if any of the optional components are set."""
        return self.resolution is not None or self.query is not None or self.fragment is not None


class URN:
    """A Uniform Resource Name, as defined by RFC 8141.

    A URN has the form ``urn:<NID>:<NSS>``, where NID is the namespace identifier
    and NSS the namespace specific string, optionally followed by an r-component
    (``?+``), a q-component (``?=``), and an f-component (``#``).

    URNs should be built with :func:`new` or :func:`parse`, which validate their
    input. Calling the class directly doesn't validate the NID and NSS, which
    is mostly useful for creating the zero value:

    >>> URN().is_zero()
    True
    >>> str(URN())
    ''

    >>> urn = new("ietf", "rfc:8141", URNOptions(fragment="section-3"))
    >>> urn
    URN(nid='ietf', nss='rfc:8141', f_component='section-3')
    >>> str(urn)
    'urn:ietf:rfc:8141#section-3'

    The NID and NSS can't be changed after creation. Components are validated
    whenever they're set:

    >>> urn.q_component = "no spaces"
    Traceback (most recent call last):
    ...
    urns.api.InvalidComponent: invalid q-component

    Setting a component to None removes it:

    >>> urn.f_component = None
    >>> str(urn)
    'urn:ietf:rfc:8141'
    """

    def __init__(
        self,
        nid: str = "",
        nss: str = "",
        *,
        r_component: str | None = None,
        q_component: str | None = None,
        f_component: str | None = None,
        original: str = "",
    ) -> None:
        """Initialize the URN without validating the NID and NSS."""
        self._nid = nid
        self._nss = nss
        self._r_component: str | None = None
        self._q_component: str | None = None
        self._f_component: str | None = None
        self.r_component = r_component
        self.q_component = q_component
        self.f_component = f_component
        #: The input given to :func:`parse`, empty otherwise
        self.original = original

    @property
    def nid(self) -> str:
        """Get the namespace identifier."""
        return self._nid

    @property
    def nss(self) -> str:
        """Get the namespace specific string."""
        return self._nss

    @property
    def r_component(self) -> str | None:
        """Get the r-component, i.e., the part introduced by ``?+``."""
        return self._r_component

    @r_component.setter
    def r_component(self, component: str | None) -> None:
        self._r_component = _check_component("r-component", component)

    @property
    def q_component(self) -> str | None:
        """Get the q-component, i.e., the part introduced by ``?=``.

        Note that unlike URIs, a question mark alone doesn't introduce a query.
        """
        return self._q_component

    @q_component.setter
    def q_component(self, component: str | None) -> None:
        self._q_component = _check_component("q-component", component)

    @property
    def f_component(self) -> str | None:
        """Get the f-component, i.e., the part introduced by ``#``."""
        return self._f_component

    @f_component.setter
    def f_component(self, component: str | None) -> None:
        self._f_component = _check_component("f-component", component)

    def is_zero(self) -> bool:
        """Return if the NID or the NSS is missing."""
        return not self.nid or not self.nss

    @property
    def urn(self) -> str:
        """Get the URN as a string.

        Components that are missing or empty are left out.

        >>> new("isbn", "978-0135800911", URNOptions(query="a=1", fragment="p5")).urn
        'urn:isbn:978-0135800911?=a=1#p5'
        """
        if self.is_zero():
            return ""
        rv = f"urn:{self.nid}:{self.nss}"
        if self._r_component:
            rv += f"?+{self._r_component}"
        if self._q_component:
            rv += f"?={self._q_component}"
        if self._f_component:
            rv += f"#{self._f_component}"
        return rv

    def __str__(self) -> str:
        return self.urn

    def __repr__(self) -> str:
        parts = [f"nid={self.nid!r}", f"nss={self.nss!r}"]
        for key, value in self._components():
            if value is not None:
                parts.append(f"{key}={value!r}")
        return f"URN({', '.join(parts)})"

    def _components(self) -> list[tuple[str, str | None]]:
        return [
            ("r_component", self._r_component),
            ("q_component", self._q_component),
            ("f_component", self._f_component),
        ]

    def __eq__(self, other: Any) -> bool:
        """Check structural equality, ignoring the original input.

        Missing and empty components are considered the same, since they
        serialize the same way. For RFC 8141 equivalence, use :meth:`equivalent`.
        """
        if not isinstance(other, URN):
            return NotImplemented
        return (
            self.nid == other.nid
            and self.nss == other.nss
            and all(
                (a or "") == (b or "")
                for (_, a), (_, b) in zip(self._components(), other._components())
            )
        )

    # instances are mutable through the component setters
    __hash__ = None  # type:ignore[assignment]

    def equivalent(self, other: URN) -> bool:
        """Check if this URN and the other are equivalent under RFC 8141.

        :param other: Another URN
        :return: If the NIDs match case-insensitively and the NSSs match
            after normalizing percent-encoded octets. Components are ignored.
        :raises ContractViolation: if the other URN is missing

        >>> urn = new("ietf", "rfc:8141")
        >>> urn.equivalent(new("IETF", "rfc:8141", URNOptions(preserve_case=True)))
        True
        >>> urn.equivalent(new("ietf", "RFC:8141"))
        False
        >>> urn.equivalent(new("ietf", "rfc:8141", URNOptions(fragment="section-3")))
        True
        """
        if not isinstance(other, URN):
            raise ContractViolation(
                f"can not check equivalence of a URN against {type(other).__name__}"
            )
        return self.nid.lower() == other.nid.lower() and normalize_percent_encoding(
            self.nss
        ) == normalize_percent_encoding(other.nss)

    def to_json(self) -> str:
        """Get the URN as a JSON string.

        >>> new("isbn", "978-0135800911", URNOptions(fragment="Chapter8")).to_json()
        '"urn:isbn:978-0135800911#Chapter8"'
        >>> URN().to_json()
        '""'
        """
        return json.dumps(self.urn)

    @classmethod
    def from_json(cls, data: str | bytes) -> URN:
        """Parse a JSON string into a URN.

        :param data: JSON text containing a single string
        :return: The parsed URN, or the zero value if the string is empty
        :raises TypeError: if the JSON doesn't contain a string
        :raises URNError: if the string isn't a valid URN

        >>> URN.from_json('"UrN:IsBn:978-0135800911#chapter1"')
        URN(nid='isbn', nss='978-0135800911', f_component='chapter1')
        >>> URN.from_json('""').is_zero()
        True
        """
        value = json.loads(data)
        if not isinstance(value, str):
            raise TypeError(f"expected a JSON string, got {type(value).__name__}")
        return _parse_or_zero(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: type[Any], handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        from_str = core_schema.no_info_after_validator_function(
            _parse_or_zero, core_schema.str_schema()
        )
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(cls), from_str]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                _to_str, info_arg=False, return_schema=core_schema.str_schema()
            ),
        )


def _check_component(kind: str, component: str | None) -> str | None:
    if component is None:
        return None
    if not is_component(component):
        raise InvalidComponent(kind, component)
    return component


def _to_str(urn: URN) -> str:
    return urn.urn


def _parse_or_zero(value: str) -> URN:
    rv = parse(value)
    if rv is None:
        logger.debug("got empty URN string, using zero value")
        return URN()
    return rv


def new(nid: str, nss: str, options: URNOptions | None = None) -> URN:
    """Build a URN from its namespace identifier and namespace specific string.

    :param nid: The namespace identifier
    :param nss: The namespace specific string
    :param options: Optional components and the case policy
    :return: A validated URN
    :raises InvalidNID: if the NID doesn't match the grammar
    :raises InvalidNSS: if the NSS doesn't match the grammar
    :raises InvalidComponent: if one of the components doesn't match the grammar

    The NID is lower-cased, unless ``preserve_case`` is given. The NSS is kept
    as is, since it's case-sensitive outside of percent-encoding.

    >>> new("IsBn", "978-0135800911")
    URN(nid='isbn', nss='978-0135800911')
    >>> new("IsBn", "978-0135800911", URNOptions(preserve_case=True))
    URN(nid='IsBn', nss='978-0135800911')
    """
    if not is_nid(nid):
        raise InvalidNID(nid)
    if not is_nss(nss):
        raise InvalidNSS(nss)
    if options is None:
        options = URNOptions()

    rv = URN(nid if options.preserve_case else nid.lower(), nss)
    if options.resolution is not None:
        rv.r_component = options.resolution
    if options.query is not None:
        rv.q_component = options.query
    if options.fragment is not None:
        rv.f_component = options.fragment
    return rv


def parse(s: str, options: URNOptions | None = None) -> URN | None:
    """Parse a string into a URN.

    :param s: A string
    :param options: Options passed to :func:`new`. Components can't be set this way.
    :return: The parsed URN, or None if the string is empty or only whitespace
    :raises ContractViolation: if the options contain a component
    :raises InvalidURN: if the string doesn't match the URN grammar

    >>> urn = parse("urn:ietf:rfc:8141#section-3")
    >>> urn.nid, urn.nss, urn.f_component
    ('ietf', 'rfc:8141', 'section-3')
    >>> parse("UrN:IsBn:978-0135800911").urn
    'urn:isbn:978-0135800911'
    >>> parse("") is None
    True
    """
    if options is not None and options.has_components:
        raise ContractViolation("component options can not be used when parsing a URN")
    if not s.strip():
        return None

    match = match_urn(s)
    if match is None:
        logger.debug("could not match URN grammar: %r", s)
        raise InvalidURN(s)

    rv = new(match.nid, match.nss, options)
    # the grammar already guarantees the components are legal
    rv._r_component = match.r_component
    rv._q_component = match.q_component
    rv._f_component = match.f_component
    rv.original = s
    return rv


def validates(s: str) -> bool:
    """Return if the string can be parsed as a URN.

    >>> validates("urn:ietf:rfc:8141#section-3")
    True
    >>> validates("urn:ie+tf:rfc:8141#section-3")
    False
    >>> validates("")
    False
    """
    try:
        rv = parse(s)
    except URNError:
        return False
    return rv is not None and not rv.is_zero()
