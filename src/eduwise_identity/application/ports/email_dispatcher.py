"""Email dispatcher port.

The identity lifecycle only needs a single send operation. Adapters decide
how the message actually leaves the process (SMTP, a provider API, a test
recorder).
"""

from abc import ABC, abstractmethod


class EmailDispatcher(ABC):
    """Delivers one HTML email to one recipient."""

    @abstractmethod
    async def send(self, recipient: str, subject: str, html_body: str) -> None:
        """Send a message.

        Raises
        ------
        EmailDeliveryError
            If the message could not be handed off for delivery
        """
