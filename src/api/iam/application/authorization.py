"""Authorization checkpoint: maps a resolved principal to the invoked route."""

from __future__ import annotations

from typing import TYPE_CHECKING

from iam.application.observability import DefaultAuthorizationProbe
from iam.domain.permissions import normalize_endpoint
from iam.ports.exceptions import PermissionDeniedError

if TYPE_CHECKING:
    from iam.application.observability import AuthorizationProbe
    from iam.domain.principals import TenantUser


class AuthorizationCheckpoint:
    """Allows a tenant user into a route only with a matching permit.

    The decision reads `permitted_endpoints` of the principal handed in,
    which resolvers rebuild from the tenant database on every request.
    """

    def __init__(self, probe: AuthorizationProbe | None = None):
        self._probe = probe or DefaultAuthorizationProbe()

    def authorize(
        self,
        principal: TenantUser,
        route_path: str,
        *,
        skip_path_validation: bool = False,
    ) -> None:
        """Allow or deny `principal` on the route registered as `route_path`.

        Args:
            principal: A resolved tenant user with its permitted endpoints.
            route_path: Path template of the matched route, e.g. `/crops/one/{id}`.
            skip_path_validation: The route only requires authentication.

        Raises:
            PermissionDeniedError: The route is not in the principal's permits.
        """
        if skip_path_validation:
            self._probe.path_validation_skipped(
                principal_id=principal.id, route_path=route_path
            )
            return

        if normalize_endpoint(route_path) in principal.permitted_endpoints:
            self._probe.access_granted(principal_id=principal.id, route_path=route_path)
            return

        self._probe.access_denied(principal_id=principal.id, route_path=route_path)
        raise PermissionDeniedError(
            principal_name=principal.first_name or principal.email,
            route_path=route_path,
        )
