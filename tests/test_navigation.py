import pytest
from sqlalchemy.exc import OperationalError

from journeydesk.models.enums import AppRole
from journeydesk.models.store import RoleNavigationSetting
from journeydesk.services.navigation import (
    DEFAULT_ICON,
    FALLBACK_NAVIGATION,
    NavigationResolver,
    NavigationResult,
)


@pytest.fixture
def resolver(repo):
    return NavigationResolver(repo)


def _setting(session, role, page_path, order, **kwargs):
    session.add(RoleNavigationSetting(
        role=role,
        page_path=page_path,
        label_key=kwargs.pop("label_key", f"sidebar.{page_path.strip('/') or 'home'}"),
        icon_name=kwargs.pop("icon_name", "Route"),
        display_order=order,
        **kwargs,
    ))


def test_no_role_yields_empty_navigation(resolver):
    assert resolver.resolve(None) == NavigationResult()
    assert resolver.resolve("") == NavigationResult(links=[], default_page="/dashboard")


def test_unknown_role_gets_empty_links(resolver):
    result = resolver.resolve("guest")
    assert result.links == []
    assert result.default_page == "/dashboard"


@pytest.mark.parametrize("role, default_page", [
    (AppRole.COACH, "/coach"),
    (AppRole.ADMIN, "/journey"),
    ("participant", "/dashboard"),
])
def test_unconfigured_role_uses_fallback(resolver, role, default_page):
    result = resolver.resolve(role)
    assert result.links == FALLBACK_NAVIGATION[AppRole(role)]
    assert result.default_page == default_page


def test_configured_rows_in_display_order(session, resolver):
    _setting(session, AppRole.COACH, "/analytics", 2, icon_name="BarChart3")
    _setting(session, AppRole.COACH, "/coach", 1, icon_name="NotAnIcon")
    _setting(session, AppRole.COACH, "/hidden", 3, is_visible=False)
    _setting(
        session, AppRole.COACH, "https://wiki.example.com", 0,
        is_external=True, is_custom=True, custom_label="Wiki", icon_name="BookOpen",
    )
    _setting(session, AppRole.ADMIN, "/admin", 1)
    session.commit()

    result = resolver.resolve("coach")

    assert [link.to for link in result.links] == ["https://wiki.example.com", "/coach", "/analytics"]
    assert result.links[0].is_external is True
    assert result.links[0].custom_label == "Wiki"
    assert result.links[1].icon == DEFAULT_ICON
    assert result.links[2].icon == "BarChart3"
    assert result.default_page == "/coach"


def test_hidden_default_page_still_applies(session, resolver):
    _setting(session, AppRole.PARTICIPANT, "/dashboard", 1)
    _setting(session, AppRole.PARTICIPANT, "/welcome", 2, is_visible=False, is_default=True)
    session.commit()

    result = resolver.resolve(AppRole.PARTICIPANT)

    assert [link.to for link in result.links] == ["/dashboard"]
    assert result.default_page == "/welcome"


def test_external_default_is_ignored(session, resolver):
    _setting(session, AppRole.FINANCE, "https://bank.example.com", 1, is_external=True, is_default=True)
    _setting(session, AppRole.FINANCE, "/finance", 2)
    session.commit()

    assert resolver.resolve("finance").default_page == "/finance"


def test_only_external_links_fall_back_to_role_default(session, resolver):
    _setting(session, AppRole.ECOMMERCE, "https://shop.example.com", 1, is_external=True)
    session.commit()

    result = resolver.resolve("ecommerce")

    assert len(result.links) == 1
    assert result.default_page == "/ecommerce"


def test_store_failure_uses_fallback(repo, resolver, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("no such table"))

    monkeypatch.setattr(repo, "fetch", broken)

    result = resolver.resolve("admin")

    assert result.links == FALLBACK_NAVIGATION[AppRole.ADMIN]
    assert result.default_page == "/journey"
