from tablebook.deps import require_admin
from tablebook.routers import admin
from fastapi.routing import APIRoute


def test_admin_router_requires_bearer_token() -> None:
    # Router-level dependency must include Bearer token verification
    assert any(dep.dependency == require_admin for dep in admin.router.dependencies)

    # Each route should inherit the auth dependency
    for route in admin.router.routes:
        if not isinstance(route, APIRoute):
            continue
        assert any(dep.call == require_admin for dep in route.dependant.dependencies)


def test_login_route_is_public() -> None:
    for route in admin.login_router.routes:
        if not isinstance(route, APIRoute):
            continue
        assert all(dep.call != require_admin for dep in route.dependant.dependencies)
