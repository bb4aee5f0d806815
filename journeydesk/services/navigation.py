"""Resolve the sidebar links and landing page for a role.

Roles with no configured rows, and any store failure, fall back to the
built-in navigation below.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from journeydesk.models.enums import AppRole
from journeydesk.models.store import RoleNavigationSetting
from journeydesk.repository import StoreRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE = "/dashboard"
DEFAULT_ICON = "LayoutDashboard"

KNOWN_ICONS = frozenset({
    "LayoutDashboard", "Route", "CheckSquare", "FileText", "Calendar",
    "TrendingUp", "BarChart3", "Users", "Shield", "Store", "DollarSign",
    "LinkIcon", "ExternalLink", "BookOpen", "Video", "MessageSquare",
    "HelpCircle", "Megaphone", "Gift", "Award", "Target",
})


@dataclass(frozen=True)
class NavigationLink:
    to: str
    label_key: str
    icon: str = DEFAULT_ICON
    is_custom: bool = False
    custom_label: str | None = None
    is_external: bool = False


@dataclass
class NavigationResult:
    links: list[NavigationLink] = field(default_factory=list)
    default_page: str = DEFAULT_PAGE


FALLBACK_NAVIGATION: dict[AppRole, list[NavigationLink]] = {
    AppRole.PARTICIPANT: [
        NavigationLink("/dashboard", "sidebar.dashboard", "LayoutDashboard"),
        NavigationLink("/journey", "sidebar.myJourney", "Route"),
        NavigationLink("/tasks", "sidebar.tasks", "CheckSquare"),
        NavigationLink("/documents", "sidebar.documents", "FileText"),
        NavigationLink("/attendance", "sidebar.attendance", "Calendar"),
        NavigationLink("/trades", "sidebar.tradeUpdates", "TrendingUp"),
    ],
    AppRole.COACH: [
        NavigationLink("/coach", "sidebar.verification", "CheckSquare"),
        NavigationLink("/analytics", "sidebar.analytics", "BarChart3"),
    ],
    AppRole.ADMIN: [
        NavigationLink("/journey", "sidebar.myJourney", "Route"),
        NavigationLink("/tasks", "sidebar.tasks", "CheckSquare"),
        NavigationLink("/documents", "sidebar.documents", "FileText"),
        NavigationLink("/attendance", "sidebar.attendance", "Calendar"),
        NavigationLink("/trades", "sidebar.tradeUpdates", "TrendingUp"),
        NavigationLink("/coach", "sidebar.verification", "Users"),
        NavigationLink("/ecommerce", "sidebar.ecommerce", "Store"),
        NavigationLink("/finance", "sidebar.finance", "DollarSign"),
        NavigationLink("/analytics", "sidebar.analytics", "BarChart3"),
        NavigationLink("/admin", "sidebar.adminPanel", "Shield"),
    ],
    AppRole.ECOMMERCE: [
        NavigationLink("/ecommerce", "sidebar.ecommerce", "Store"),
    ],
    AppRole.FINANCE: [
        NavigationLink("/finance", "sidebar.finance", "DollarSign"),
    ],
}

FALLBACK_DEFAULT_PAGE: dict[AppRole, str] = {
    AppRole.PARTICIPANT: "/dashboard",
    AppRole.COACH: "/coach",
    AppRole.ADMIN: "/journey",
    AppRole.ECOMMERCE: "/ecommerce",
    AppRole.FINANCE: "/finance",
}


def _as_role(role: AppRole | str | None) -> AppRole | None:
    if role is None or role == "":
        return None
    try:
        return AppRole(role)
    except ValueError:
        return None


def fallback_for(role: AppRole | None) -> NavigationResult:
    return NavigationResult(
        links=list(FALLBACK_NAVIGATION.get(role, [])),
        default_page=FALLBACK_DEFAULT_PAGE.get(role, DEFAULT_PAGE),
    )


class NavigationResolver:
    def __init__(self, repository: StoreRepository):
        self.repository = repository

    def resolve(self, role: AppRole | str | None) -> NavigationResult:
        if not role:
            return NavigationResult()

        app_role = _as_role(role)
        if app_role is None:
            return fallback_for(None)

        try:
            visible = self.repository.fetch(
                RoleNavigationSetting,
                RoleNavigationSetting.role == app_role,
                RoleNavigationSetting.is_visible.is_(True),
                order_by=RoleNavigationSetting.display_order,
            )
            # The default page may be hidden from the sidebar.
            configured_default = self.repository.session.execute(
                select(RoleNavigationSetting.page_path)
                .where(
                    RoleNavigationSetting.role == app_role,
                    RoleNavigationSetting.is_default.is_(True),
                    RoleNavigationSetting.is_external.is_(False),
                )
                .limit(1)
            ).scalar_one_or_none()
        except SQLAlchemyError:
            logger.exception(f"Loading navigation settings for {app_role.value} failed")
            self.repository.rollback()
            return fallback_for(app_role)

        if not visible:
            return fallback_for(app_role)

        links = [
            NavigationLink(
                to=row["page_path"],
                label_key=row["label_key"],
                icon=row["icon_name"] if row["icon_name"] in KNOWN_ICONS else DEFAULT_ICON,
                is_custom=row["is_custom"],
                custom_label=row["custom_label"] or None,
                is_external=row["is_external"],
            )
            for row in visible
        ]

        if configured_default:
            default_page = configured_default
        else:
            first_internal = next((link for link in links if not link.is_external), None)
            default_page = (
                first_internal.to if first_internal
                else FALLBACK_DEFAULT_PAGE.get(app_role, DEFAULT_PAGE)
            )

        return NavigationResult(links=links, default_page=default_page)
