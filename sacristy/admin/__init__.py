"""Admin panel controllers."""

from sacristy.admin.controller import AdminController
from sacristy.admin.donations import DonationAdminController
from sacristy.admin.entity_factory import create_entity_controller
from sacristy.admin.media import MediaAdminController
from sacristy.admin.navigation import ADMIN_NAV_TAG, AdminNavItem, build_admin_nav
from sacristy.admin.settings import SettingsAdminController
from sacristy.entities import ENTITIES


def admin_controllers() -> list:
    """Every admin controller, including one generated per entity tab."""
    controllers: list = [
        AdminController,
        MediaAdminController,
        SettingsAdminController,
        DonationAdminController,
    ]
    for position, schema in enumerate(ENTITIES.values(), start=1):
        controllers.append(create_entity_controller(schema, nav_order=position * 5))
    return controllers


__all__ = [
    "ADMIN_NAV_TAG",
    "AdminController",
    "AdminNavItem",
    "DonationAdminController",
    "MediaAdminController",
    "SettingsAdminController",
    "admin_controllers",
    "build_admin_nav",
    "create_entity_controller",
]
