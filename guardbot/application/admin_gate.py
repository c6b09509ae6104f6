"""Проверка ролей для команд."""

from __future__ import annotations

import logging
from typing import Optional, Union

from guardbot.application.contracts import AdminLookupContract
from guardbot.application.errors import AdminLookupError, AuthorizationError
from guardbot.application.models import Identifier, Role

logger = logging.getLogger(__name__)

ADMIN_STATUSES = frozenset({"administrator", "creator"})

DENIED_ADMIN = "Только для администраторов."
DENIED_OWNER = "Только для владельца бота."
DENIED_UNVERIFIED = "Не удалось проверить права администратора."


def is_authorized(
    required_role: Role,
    requester_id: Union[Identifier, int, str],
    chat_admin_status: Optional[str],
    owner_id: Optional[Union[Identifier, int, str]],
) -> bool:
    """Чистый предикат авторизации.

    Args:
        required_role: Требуемая роль
        requester_id: Кто вызывает команду
        chat_admin_status: Статус в чате (administrator, creator, member...)
        owner_id: ID владельца бота

    Returns:
        bool: True если роль подтверждена
    """
    if required_role == Role.MEMBER:
        return True
    if required_role == Role.ADMIN:
        return chat_admin_status in ADMIN_STATUSES
    if owner_id is None:
        return False
    try:
        return Identifier.parse(requester_id) == Identifier.parse(owner_id)
    except ValueError:
        return False


class AdminGate:
    """Авторизация с запросом статуса участника у платформы."""

    def __init__(self, lookup: AdminLookupContract, owner_id: Optional[Identifier]) -> None:
        self.lookup = lookup
        self.owner_id = owner_id

    async def require(self, role: Role, chat_id: Identifier, requester_id: Identifier) -> None:
        """Проверить роль.

        Ошибка запроса статуса трактуется как отказ.

        Raises:
            AuthorizationError: роль не подтверждена
        """
        if role == Role.MEMBER:
            return
        if role == Role.OWNER:
            if not is_authorized(role, requester_id, None, self.owner_id):
                raise AuthorizationError(DENIED_OWNER)
            return
        try:
            status = await self.lookup.get_member_status(chat_id, requester_id)
        except AdminLookupError as e:
            logger.warning(f"Статус {requester_id} в чате {chat_id} не получен: {e}")
            raise AuthorizationError(DENIED_UNVERIFIED) from e
        if not is_authorized(role, requester_id, status, self.owner_id):
            raise AuthorizationError(DENIED_ADMIN)
