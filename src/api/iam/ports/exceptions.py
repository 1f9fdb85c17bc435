"""Domain exceptions for the IAM bounded context.

Authentication failures all surface as unauthorized, but keep distinct
types so they are logged under distinct reasons. Messages are safe to show
to callers: they never carry tokens or passwords.
"""


class AuthenticationError(Exception):
    """Base class for every unauthorized outcome."""

    reason = "unauthorized"


class MissingCredentialError(AuthenticationError):
    """Raised when the resolver's channel carries no token."""

    reason = "missing"

    def __init__(self, channel: str):
        super().__init__(f"Authentication required: missing {channel}")
        self.channel = channel


class PrincipalNotFoundError(AuthenticationError):
    """Raised when a verified token names a principal that does not exist."""

    reason = "not_found"

    def __init__(self) -> None:
        super().__init__("Principal does not exist")


class PrincipalInactiveError(AuthenticationError):
    """Raised when the principal exists but has been deactivated."""

    reason = "inactive"

    def __init__(self) -> None:
        super().__init__("Principal is inactive")


class InvalidCredentialsError(AuthenticationError):
    """Raised when a login email/password pair does not match.

    One message covers both unknown email and wrong password.
    """

    reason = "invalid_credentials"

    def __init__(self) -> None:
        super().__init__("Email or password is incorrect")


class PermissionDeniedError(Exception):
    """Raised when an authenticated principal lacks a permit for a route."""

    def __init__(self, principal_name: str, route_path: str):
        super().__init__(f"User {principal_name} needs a permit for this action")
        self.principal_name = principal_name
        self.route_path = route_path


class InsufficientPermissionsError(Exception):
    """Raised when a user without any granted action tries to log in."""

    def __init__(self, principal_name: str):
        super().__init__(
            f"User {principal_name} does not have enough permissions to log in"
        )
        self.principal_name = principal_name


class AdministratorNotFoundError(Exception):
    """Raised when an administrator id names no (live) account."""

    def __init__(self, administrator_id: str):
        super().__init__(f"Administrator with id: {administrator_id} not found")
        self.administrator_id = administrator_id


class DuplicateAdministratorError(Exception):
    """Raised when an email already belongs to another administrator."""


class ProtectedAdministratorError(Exception):
    """Raised when an edit or removal targets an account with the admin role."""

    def __init__(self, message: str, administrator_id: str):
        super().__init__(message)
        self.administrator_id = administrator_id


class ProtectedAdministratorActionForbiddenError(ProtectedAdministratorError):
    """Raised when a status change or password reset targets an admin account."""


class IncorrectPasswordError(Exception):
    """Raised when a password change is attempted with a wrong old password.

    Not an authentication error: the caller stays logged in.
    """

    def __init__(self) -> None:
        super().__init__("Old password incorrect, retry")
