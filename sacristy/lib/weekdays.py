"""Days of the week as stored in the database, Sunday first."""

from sqlalchemy import case
from sqlalchemy.sql.elements import ColumnElement

DAYS_OF_WEEK: tuple[tuple[str, str], ...] = (
    ("sunday", "Domingo"),
    ("monday", "Segunda-feira"),
    ("tuesday", "Terça-feira"),
    ("wednesday", "Quarta-feira"),
    ("thursday", "Quinta-feira"),
    ("friday", "Sexta-feira"),
    ("saturday", "Sábado"),
)

DAY_IDS = tuple(day for day, _ in DAYS_OF_WEEK)


def day_label(day_id: str) -> str:
    """Portuguese label for a day id, or the id itself when unknown."""
    return dict(DAYS_OF_WEEK).get(day_id, day_id)


def day_order(column) -> ColumnElement:
    """SQL expression sorting a day-of-week column Sunday..Saturday.

    Unknown values sort last.
    """
    return case(
        {day: position for position, day in enumerate(DAY_IDS)},
        value=column,
        else_=len(DAY_IDS),
    )
