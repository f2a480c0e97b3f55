from abc import ABC, abstractmethod


class EmailSender(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, html: str, tags: dict[str, str] | None = None) -> str | None:
        """Deliver one message and return the provider's message id, if any."""
        ...
