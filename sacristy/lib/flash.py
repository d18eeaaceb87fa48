"""Toast notifications for the admin panel, queued in the cookie session.

Each admin action records its outcome here before redirecting; the next
rendered page pops the queue and shows the toasts.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from litestar import Request

SESSION_KEY = "toasts"


class ToastVariant(str, Enum):
    """Visual variant of a toast, used as its CSS modifier."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class Toast:
    title: str
    description: str = ""
    variant: ToastVariant = ToastVariant.INFO


def push_toast(
    request: "Request",
    title: str,
    description: str = "",
    variant: ToastVariant = ToastVariant.INFO,
) -> None:
    """Queue a toast for the next rendered page."""
    queue = list(request.session.get(SESSION_KEY, []))
    queue.append({"title": title, "description": description, "variant": variant.value})
    request.session[SESSION_KEY] = queue


def pop_toasts(request: "Request") -> list[Toast]:
    """Return and clear all queued toasts."""
    queue = request.session.pop(SESSION_KEY, [])
    return [
        Toast(
            title=t["title"],
            description=t.get("description", ""),
            variant=ToastVariant(t.get("variant", ToastVariant.INFO.value)),
        )
        for t in queue
    ]


def toast_success(request: "Request", title: str, description: str = "") -> None:
    push_toast(request, title, description, ToastVariant.SUCCESS)


def toast_error(request: "Request", title: str, description: str = "") -> None:
    push_toast(request, title, description, ToastVariant.ERROR)


def toast_warning(request: "Request", title: str, description: str = "") -> None:
    push_toast(request, title, description, ToastVariant.WARNING)
