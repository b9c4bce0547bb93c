"""
Defines the SQLAlchemy Base for all ORM models in the application.

Model modules are imported at the bottom so ``Base.metadata`` knows every
table as soon as the package is imported.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()

from . import activity, user  # noqa: E402,F401  pylint: disable=wrong-import-position
