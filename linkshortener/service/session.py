"""Per-user session context

A Session binds the authenticated ("current") user to the link service and
proxies every owner-scoped operation. The user is looked up again on every
call; a user that disappeared after authentication is an internal invariant
violation which aborts the operation.

Example:
    >>> session = service.authenticate('alice')
    >>> session.create_link('https://example.com', '1h')
    'http://localhost:3000/aB3xY9'
    >>> [link.token for link in session.list_links()]
    ['aB3xY9']
"""

from typing import TYPE_CHECKING

from linkshortener.models import LinkModel, UserModel

if TYPE_CHECKING:
    from linkshortener.service.link_service import LinkService


class Session:
    def __init__(self, service: 'LinkService', user: UserModel):
        self.service = service
        self.user_id = user.user_id

    @property
    def user(self) -> UserModel:
        return self.service.user(self.user_id)

    def create_link(self, target: str, duration_text: str, visit_limit: int | None = None) -> str:
        return self.service.create_link(self.user.user_id, target, duration_text, visit_limit)

    def edit_link(
        self,
        token: str,
        target: str | None = None,
        duration_text: str | None = None,
        visit_limit: int | None = None,
    ) -> LinkModel:
        return self.service.edit_link(self.user.user_id, token, target, duration_text, visit_limit)

    def delete_link(self, token: str) -> bool:
        return self.service.delete_link(self.user.user_id, token)

    def list_links(self) -> list[LinkModel]:
        return self.service.list_links(self.user.user_id)
