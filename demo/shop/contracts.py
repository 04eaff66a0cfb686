from abc import ABC, abstractmethod
from typing import Protocol


# @Token
class OrderRepository(ABC):
    """Abstract order storage."""

    @abstractmethod
    def save(self, order_id: str, total: float) -> None:
        pass


# @Token
class Notifier(Protocol):
    def notify(self, message: str) -> None: ...
