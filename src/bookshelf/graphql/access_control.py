"""
Shared access control logic for GraphQL resolvers
"""

from typing import TYPE_CHECKING

import strawberry

from ..logging import get_logger
from .errors import AuthenticationRequiredError

if TYPE_CHECKING:
    from ..dbmodels import Users

logger = get_logger(__name__)


def get_current_user_from_info(info: strawberry.Info) -> "Users | None":
    """Return the user resolved for this request, if any."""
    return info.context.current_user


def require_current_user(info: strawberry.Info) -> "Users":
    """
    Return the current user or fail the field with an authentication error.

    Raises:
        AuthenticationRequiredError: If the request carries no valid user
    """
    user = get_current_user_from_info(info)
    if user is None:
        logger.info("Unauthenticated access to protected operation", field=info.field_name)
        raise AuthenticationRequiredError()
    return user
