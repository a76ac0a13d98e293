# Filename: rutz/services/checkout.py
# Session cart -> order. Stock is reserved per line after the order row
# exists so each reservation movement carries the order id.

from decimal import Decimal
from typing import Optional

from decouple import config

from rutz.errors import CheckoutError
from rutz.schemas import OrderCreate, OrderItemCreate, OrderWithItems
from rutz.storage import IStorage
from rutz.utils import logger, to_money

TAX_RATE = config("TAX_RATE", default="0.08", cast=Decimal)
SHIPPING_FLAT_RATE = config("SHIPPING_FLAT_RATE", default="0.00", cast=Decimal)


def place_order(storage: IStorage, session_id: str, user_id: Optional[str] = None) -> OrderWithItems:
    """Turn the session's cart into a pending order.

    Raises CheckoutError when the cart is empty or a line cannot be
    reserved; in the latter case earlier reservations are released and
    the order is left cancelled.
    """
    cart = [item for item in storage.get_cart_items(session_id) if item.quantity > 0]
    if not cart:
        raise CheckoutError("Cart is empty")

    lines = [
        OrderItemCreate(product_id=item.product_id, quantity=item.quantity, price=item.product.price)
        for item in cart
    ]
    subtotal = to_money(sum((line.price * line.quantity for line in lines), Decimal("0")))
    tax = to_money(subtotal * TAX_RATE)
    shipping = to_money(SHIPPING_FLAT_RATE)
    order = storage.create_order(OrderCreate(
        user_id=user_id,
        session_id=session_id,
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=to_money(subtotal + tax + shipping),
        items=lines,
    ))

    reserved = []
    for line in lines:
        if not storage.reserve_stock(line.product_id, line.quantity, order.id):
            for done in reserved:
                storage.release_stock(done.product_id, done.quantity, order.id)
            storage.mark_order_cancelled(order.id)
            logger.info(f"Order {order.id} cancelled: insufficient stock for {line.product_id}")
            raise CheckoutError(f"Insufficient stock for {line.product_id}")
        reserved.append(line)

    storage.clear_cart(session_id)
    if user_id:
        storage.add_user_spend(user_id, order.total)
    logger.info(f"Order {order.id} placed: {len(lines)} lines, total {order.total}")
    return storage.get_order_with_items(order.id)


def cancel_order(storage: IStorage, order_id: str) -> Optional[OrderWithItems]:
    """Cancel an order, hand its reserved stock back and debit the spend.

    Only the call that actually flips the status releases stock, so a
    repeated or concurrent cancel is a no-op.
    """
    order = storage.get_order_with_items(order_id)
    if order is None:
        return None
    if storage.mark_order_cancelled(order_id):
        for item in order.items:
            storage.release_stock(item.product_id, item.quantity, order_id)
        if order.user_id:
            storage.add_user_spend(order.user_id, -order.total)
        logger.info(f"Order {order_id} cancelled, {len(order.items)} lines released")
    return storage.get_order_with_items(order_id)
