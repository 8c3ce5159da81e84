"""Request dependencies enforcing the route guard."""

from collections.abc import Callable

from fastapi import Request

from finflow.domain.models import Identity
from finflow.services.access import Route, guard


def require(route: Route) -> Callable[[Request], Identity]:
    """Dependency yielding the identity allowed past ``route``."""

    def dependency(request: Request) -> Identity:
        return guard(route, request.app.state.session)

    return dependency
