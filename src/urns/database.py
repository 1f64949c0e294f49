"""Database adapters for :mod:`urns`.

Using :mod:`sqlalchemy`
=======================

URNs are stored in their canonical string form in a text column. Use the column
returned by :func:`get_urn_sa_column` to get :class:`urns.URN` objects back
when querying:

.. code-block:: python

    from sqlalchemy import Column, Integer, create_engine
    from sqlalchemy.orm import DeclarativeBase, Session

    from urns import parse
    from urns.database import get_urn_sa_column


    class Base(DeclarativeBase):
        pass


    class Document(Base):
        __tablename__ = "document"

        id = Column(Integer, primary_key=True)
        urn = get_urn_sa_column(nullable=False)


    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        session.add(Document(urn=parse("urn:isbn:978-0135800911")))
        session.commit()

    # Query by string or by URN
    with Session(engine) as session:
        document = (
            session.query(Document)
            .filter(Document.urn == "urn:isbn:978-0135800911")
            .one()
        )

Note that querying compares the canonical strings, which isn't the same as
checking RFC 8141 equivalence with :meth:`urns.URN.equivalent`.
"""

from __future__ import annotations

from typing import Any, ClassVar

import sqlalchemy
from sqlalchemy.engine.interfaces import Dialect
from sqlalchemy.sql.type_api import TypeEngine
from sqlalchemy.types import TEXT, TypeDecorator

from .api import URN, parse

__all__ = [
    "SAURNTypeDecorator",
    "get_urn_sa_column",
]


class SAURNTypeDecorator(TypeDecorator[URN]):
    """A SQLAlchemy type decorator for a :class:`urns.URN`."""

    impl: ClassVar[type[TypeEngine[str]]] = TEXT  # type:ignore[misc]
    #: Set SQLAlchemy caching to true
    cache_ok: ClassVar[bool] = True  # type:ignore[misc]

    def process_bind_param(self, value: str | URN | None, dialect: Dialect) -> str | None:
        """Convert the Python object into a database value.

        Strings are parsed first, so only canonical URNs get stored.

        :raises urns.URNError: if a string isn't a valid URN
        """
        if value is None:
            return None
        if isinstance(value, str):
            urn = parse(value)
            return "" if urn is None else urn.urn
        return value.urn

    def process_result_value(self, value: str | None, dialect: Dialect) -> URN | None:
        """Convert the database value into a Python object."""
        if value is None:
            return None
        rv = parse(value)
        if rv is None:
            return URN()
        return rv


def get_urn_sa_column(*args: Any, **kwargs: Any) -> sqlalchemy.Column[URN]:
    """Get a SQLAlchemy column with the type decorator for a :class:`urns.URN`.

    :param args: positional arguments, passed to :class:`sqlalchemy.Column`
    :param kwargs: keyword arguments, passed to :class:`sqlalchemy.Column`

    :returns: A column object, parametrized with :class:`urns.URN`
    """
    return sqlalchemy.Column(SAURNTypeDecorator(), *args, **kwargs)
