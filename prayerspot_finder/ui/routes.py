"""Route table for the app.

The current path lives in the ``path`` query parameter. Parsing is pure so
that page dispatch can be tested without a Streamlit runtime.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from prayerspot_finder.constants import RouteConfig, SlugConfig


class RouteKind(Enum):
    HOME = "home"
    AUTH = "auth"
    ADD = "add"
    DETAIL = "detail"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Route:
    """Parsed route. ``slug`` is set for DETAIL routes only."""

    kind: RouteKind
    slug: Optional[str] = None

    @property
    def path(self) -> str:
        if self.kind == RouteKind.DETAIL:
            return f"/{self.slug}"
        return {
            RouteKind.HOME: RouteConfig.HOME,
            RouteKind.AUTH: RouteConfig.AUTH,
            RouteKind.ADD: RouteConfig.ADD,
        }.get(self.kind, RouteConfig.HOME)


_STATIC_ROUTES = {
    RouteConfig.HOME: RouteKind.HOME,
    RouteConfig.AUTH: RouteKind.AUTH,
    RouteConfig.ADD: RouteKind.ADD,
}


def parse_route(path: Optional[str]) -> Route:
    """Map a path to a Route.

    ``/:country/:city/:slug`` (exactly three non-empty segments) is a detail
    route. Unknown paths resolve to NOT_FOUND.
    """
    if not path:
        return Route(kind=RouteKind.HOME)
    if not path.startswith("/"):
        path = "/" + path

    static = _STATIC_ROUTES.get(path.rstrip("/") or RouteConfig.HOME)
    if static is not None:
        return Route(kind=static)

    segments = path[1:].split(SlugConfig.SEPARATOR)
    if len(segments) == 3 and all(segments):
        return Route(kind=RouteKind.DETAIL, slug=SlugConfig.SEPARATOR.join(segments))
    return Route(kind=RouteKind.NOT_FOUND)
