"""Columns shared by records that keep a manual display order."""

from sqlalchemy import Boolean, Integer
from sqlalchemy.orm import Mapped, mapped_column


class OrderedMixin:
    """Adds ``order_index`` (ascending display order) and ``is_active``.

    ``order_index`` is unique per partition only by convention; deletes leave
    gaps and nothing renumbers the remaining rows.
    """

    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
