from dataclasses import dataclass

from .contracts import Notifier, OrderRepository


# @Token
# @Injectable
# @Scope("scoped")
@dataclass
class CheckoutService:
    orders: OrderRepository
    notifier: Notifier

    def checkout(self, order_id: str, total: float) -> None:
        self.orders.save(order_id, total)
        self.notifier.notify(f"Order {order_id} placed: {total:.2f}")


# @Token
# @Depends
def make_receipt_printer(notifier: Notifier):
    return lambda order_id: notifier.notify(f"Receipt for {order_id}")


# @Token
# @Injectable
currency = "EUR"
