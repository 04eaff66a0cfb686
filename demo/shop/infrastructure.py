from .contracts import Notifier, OrderRepository


# @Token
# @Injectable
# @Scope("singleton")
class Settings:
    """Application settings."""

    dsn = "sqlite:///:memory:"
    sender = "shop@example.com"


# @Token
# @Reflect
# @Injectable
# @Scope("singleton")
class InMemoryOrderRepository(OrderRepository):
    def __init__(self, settings: Settings):
        self.settings = settings
        self.orders: dict[str, float] = {}

    def save(self, order_id: str, total: float) -> None:
        self.orders[order_id] = total


# @Token
# @Reflect
# @Injectable
class ConsoleNotifier(Notifier):
    def __init__(self, settings: Settings):
        self.sender = settings.sender

    def notify(self, message: str) -> None:
        print(f"[{self.sender}] {message}")
