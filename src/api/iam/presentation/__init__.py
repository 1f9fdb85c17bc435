"""IAM presentation layer.

Exposes the auth router (login, session checks and logout for every
credential channel), the administrator management router and the IAM
exception handlers.
"""

from __future__ import annotations

from iam.presentation.administrators.routes import router as administrators_router
from iam.presentation.auth.routes import router
from iam.presentation.errors import register_iam_exception_handlers

__all__ = ["administrators_router", "register_iam_exception_handlers", "router"]
