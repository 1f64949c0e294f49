"""Tests for database adapters."""

from __future__ import annotations

import unittest

from urns import URN, InvalidURN, URNOptions, new, parse
from urns.database import get_urn_sa_column

urn_1 = new("isbn", "978-0135800911")
urn_2 = new("ietf", "rfc:8141", URNOptions(fragment="section-3"))
urn_3 = new("example", "a123%2Cz456", URNOptions(resolution="r", query="q=1"))
name_1 = "Name 1"
name_2 = "Name 2"
name_3 = "Name 3"


class TestDatabase(unittest.TestCase):
    """Tests for database adapters."""

    def test_sqlalchemy(self) -> None:
        """Test SQLAlchemy."""
        from sqlalchemy import Column, Integer, String, create_engine
        from sqlalchemy.orm import DeclarativeBase, Session

        class Base(DeclarativeBase):
            """A base."""

        class MyModel(Base):
            """A SQLAlchemy model that uses a URN."""

            __tablename__ = "my_model"

            id = Column(Integer, primary_key=True)
            urn = get_urn_sa_column()
            optional_urn = get_urn_sa_column(nullable=True)
            name = Column(String)

        engine = create_engine("sqlite://")
        Base.metadata.create_all(engine)

        model_1 = MyModel(urn=urn_1, name=name_1)
        model_2 = MyModel(urn=urn_2, name=name_2)
        model_3 = MyModel(urn=str(urn_3), optional_urn=urn_1, name=name_3)

        with Session(engine) as session:
            session.add(model_1)
            session.add(model_2)
            session.add(model_3)
            session.commit()

        # Test querying with reconstitution
        with Session(engine) as session:
            result = session.query(MyModel).filter(MyModel.urn == urn_1).one()

        self.assertIsInstance(result.urn, URN)
        self.assertEqual(urn_1, result.urn)
        self.assertEqual(name_1, result.name)
        self.assertIsNone(result.optional_urn)

        # Test querying by string, with components kept
        with Session(engine) as session:
            result = (
                session.query(MyModel).filter(MyModel.urn == "urn:ietf:rfc:8141#section-3").one()
            )

        self.assertEqual("section-3", result.urn.f_component)
        self.assertEqual(name_2, result.name)

        # Test a URN stored from a string
        with Session(engine) as session:
            result = session.query(MyModel).filter(MyModel.name == name_3).one()

        self.assertEqual(urn_3, result.urn)
        self.assertEqual("r", result.urn.r_component)
        self.assertEqual("q=1", result.urn.q_component)
        self.assertEqual(urn_1, result.optional_urn)

        # Test looking up a URN that's missing. Note that this is string
        # comparison, not RFC 8141 equivalence
        with Session(engine) as session:
            missing = parse("urn:example:a123%2cz456?+r?=q=1")
            self.assertIsNone(
                session.query(MyModel).filter(MyModel.urn == missing).one_or_none()
            )

    def test_sqlalchemy_bind(self) -> None:
        """Test that values are checked and made canonical before they're stored."""
        from sqlalchemy import Column, Integer, String, create_engine, text
        from sqlalchemy.exc import StatementError
        from sqlalchemy.orm import DeclarativeBase, Session

        class Base(DeclarativeBase):
            """A base."""

        class MyModel(Base):
            """A SQLAlchemy model that uses a URN."""

            __tablename__ = "my_model"

            id = Column(Integer, primary_key=True)
            urn = get_urn_sa_column()
            name = Column(String)

        engine = create_engine("sqlite://")
        Base.metadata.create_all(engine)

        # Test an invalid string fails when writing, not on a later read
        with Session(engine) as session:
            session.add(MyModel(urn="not a urn", name=name_1))
            with self.assertRaises(StatementError) as e:
                session.commit()
            self.assertIsInstance(e.exception.orig, InvalidURN)

        with Session(engine) as session:
            session.add(MyModel(urn="URN:ISBN:1", name=name_2))
            session.add(MyModel(urn=URN(), name=name_3))
            session.commit()

        # Test that strings are stored in canonical form
        with Session(engine) as session:
            rows = session.execute(text("SELECT urn FROM my_model ORDER BY id")).scalars().all()
        self.assertEqual(["urn:isbn:1", ""], list(rows))

        with Session(engine) as session:
            result = session.query(MyModel).filter(MyModel.urn == parse("URN:ISBN:1")).one()
            self.assertEqual("urn:isbn:1", str(result.urn))
            self.assertEqual(name_2, result.name)

            # querying with the non-canonical string also works
            result = session.query(MyModel).filter(MyModel.urn == "URN:ISBN:1").one()
            self.assertEqual(name_2, result.name)

        # Test the zero value reads back as the zero value
        with Session(engine) as session:
            result = session.query(MyModel).filter(MyModel.name == name_3).one()
            self.assertIsInstance(result.urn, URN)
            self.assertTrue(result.urn.is_zero())
