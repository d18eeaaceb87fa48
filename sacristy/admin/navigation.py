"""Admin navigation built from route handlers tagged for the nav bar."""

from __future__ import annotations

from dataclasses import dataclass

from litestar import Litestar

ADMIN_NAV_TAG = "admin-nav"


@dataclass
class AdminNavItem:
    label: str
    path: str
    icon: str = "file"
    order: int = 100
    active: bool = False


def build_admin_nav(app: Litestar, current_path: str = "") -> list[AdminNavItem]:
    """Collect GET handlers tagged ``ADMIN_NAV_TAG`` into sorted nav entries.

    A handler contributes its ``opt`` label, icon and order.
    """
    items: dict[str, AdminNavItem] = {}
    for route in app.routes:
        for handler in getattr(route, "route_handlers", ()):
            if ADMIN_NAV_TAG not in (handler.tags or ()):
                continue
            path = route.path.rstrip("/") or "/"
            if path in items:
                continue
            items[path] = AdminNavItem(
                label=handler.opt.get("label", path),
                path=path,
                icon=handler.opt.get("icon", "file"),
                order=handler.opt.get("order", 100),
                active=current_path == path or current_path.startswith(f"{path}/"),
            )
    return sorted(items.values(), key=lambda item: (item.order, item.label))
