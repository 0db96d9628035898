"""
Request-scoped context handed to every GraphQL resolver
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from ..dbmodels import Users
    from ..pubsub import Broadcast


class GraphQLContext(BaseContext):
    """Current user and event broadcaster for one request or subscription."""

    def __init__(self, current_user: Users | None, broadcast: Broadcast) -> None:
        super().__init__()
        self.current_user = current_user
        self.broadcast = broadcast

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None
