"""Declarative base shared by every table.

``UUIDAuditBase`` contributes the ``id`` primary key plus the ``created_at`` and
``updated_at`` audit columns.
"""

from advanced_alchemy.base import UUIDAuditBase


class Base(UUIDAuditBase):
    __abstract__ = True
