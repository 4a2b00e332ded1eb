"""Tests for routes.py - path parsing for page dispatch."""

import pytest

from prayerspot_finder.ui.routes import Route, RouteKind, parse_route


class TestParseRoute:
    @pytest.mark.parametrize("path", [None, "", "/"])
    def test_home(self, path: str | None) -> None:
        assert parse_route(path) == Route(kind=RouteKind.HOME)

    @pytest.mark.parametrize(
        ("path", "kind"),
        [("/auth", RouteKind.AUTH), ("/add", RouteKind.ADD), ("/add/", RouteKind.ADD), ("auth", RouteKind.AUTH)],
    )
    def test_static_routes(self, path: str, kind: RouteKind) -> None:
        assert parse_route(path).kind == kind

    def test_detail_route(self) -> None:
        route = parse_route("/usa/nyc/quiet-room")
        assert route == Route(kind=RouteKind.DETAIL, slug="usa/nyc/quiet-room")
        assert route.path == "/usa/nyc/quiet-room"

    @pytest.mark.parametrize("path", ["/usa/nyc", "/usa/nyc/quiet-room/extra", "/usa//quiet-room", "/settings"])
    def test_unknown_paths_are_not_found(self, path: str) -> None:
        assert parse_route(path).kind == RouteKind.NOT_FOUND

    def test_static_route_paths(self) -> None:
        assert Route(kind=RouteKind.ADD).path == "/add"
        assert Route(kind=RouteKind.HOME).path == "/"
