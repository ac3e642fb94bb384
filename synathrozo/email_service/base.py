from abc import ABC, abstractmethod

from synathrozo.dispatch.dtos import NotificationPayload


class EmailServiceBase(ABC):
    @abstractmethod
    async def send_invitation(self, payload: NotificationPayload) -> str | None:
        """Render and send an invitation (or confirmation) email.

        Returns:
            The provider's message id
        """
        pass
