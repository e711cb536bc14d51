"""Client-side cart state, mirrored to a per-user remote document."""
import asyncio
from decimal import Decimal
from typing import Any, Callable, Coroutine, Optional

from shopcart.auth.identity import IdentityProvider, IdentityUser, SupabaseIdentityProvider
from shopcart.db import get_supabase
from shopcart.errors import (
    ERROR_CART_EMPTY_OR_UNAUTHENTICATED,
    ERROR_INVALID_NAME,
    ERROR_INVALID_PRICE,
    ERROR_INVALID_PRODUCT_ID,
    InvalidOperation,
)
from shopcart.logging import get_logger, sanitize_id_for_logging
from shopcart.services.models import Order
from shopcart.services.money import parse_money, round_money, to_float
from .models import LineItem, count_items, deserialize_items, serialize_items, total_price
from .storage import DocumentStore, get_document_store

logger = get_logger(__name__)

Listener = Callable[["CartStore"], None]


class CartStore:
    """
    Holds the signed-in user's cart and keeps the remote copy in sync.

    - Reloads the cart from the document store on every sign-in
    - Clears local state on sign-out
    - Writes the whole cart after each add/remove (fire-and-forget)
    - Notifies subscribed listeners after every state change

    Local state always wins: remote write failures are logged, never raised.
    place_order() is the exception and propagates storage errors.
    """

    def __init__(self, identity: IdentityProvider, documents: DocumentStore) -> None:
        self._documents = documents
        self._user_id: Optional[str] = None
        self._items: list[LineItem] = []
        self._listeners: list[Listener] = []
        self._pending: set[asyncio.Task] = set()
        # Bumped on every identity change; fetches started under an older value are dropped
        self._generation = 0
        self._disposed = False

        logger.info("CartStore initialized")
        self._unsubscribe_identity: Optional[Callable[[], None]] = identity.on_identity_change(
            self._on_identity_change
        )

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def items(self) -> tuple[LineItem, ...]:
        return tuple(self._items)

    @property
    def item_count(self) -> int:
        return count_items(self._items)

    @property
    def total_price(self) -> Decimal:
        return total_price(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get_item(self, product_id: str) -> Optional[LineItem]:
        return next((item for item in self._items if item.product_id == product_id), None)

    def summary(self) -> dict:
        """Cart summary for views."""
        if not self._items:
            return {
                "is_empty": True,
                "total_items": 0,
                "items": [],
                "total": 0,
            }

        return {
            "is_empty": False,
            "total_items": self.item_count,
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit_price": to_float(round_money(item.unit_price)),
                    "total": to_float(round_money(item.total_price)),
                }
                for item in self._items
            ],
            "total": to_float(round_money(self.total_price)),
        }

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.warning(f"Cart listener failed: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def _on_identity_change(self, user: Optional[IdentityUser]) -> None:
        if self._disposed:
            return

        self._generation += 1

        if user is None:
            logger.info("User logged out, clearing cart")
            self._user_id = None
            self._items = []
            self._notify_listeners()
            return

        logger.info(f"User logged in: {sanitize_id_for_logging(user.id)}. Fetching cart...")
        self._user_id = user.id
        scheduled = self._schedule(self._fetch_cart(user.id, self._generation), "cart fetch")
        if not scheduled:
            self._items = []
            self._notify_listeners()

    async def _fetch_cart(self, user_id: str, generation: int) -> None:
        try:
            data = await self._documents.get_cart(user_id)
            items = deserialize_items(data) if data else []
        except Exception as e:
            logger.error(
                f"Error fetching cart for user {sanitize_id_for_logging(user_id)}: {e}",
                exc_info=True,
            )
            items = []

        if self._disposed or generation != self._generation:
            logger.debug(f"Discarding stale cart fetch for user {sanitize_id_for_logging(user_id)}")
            return

        self._items = items
        logger.info(f"Cart fetched: {len(items)} items")
        self._notify_listeners()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_item(self, product_id: str, name: str, unit_price) -> None:
        """Add one unit of a product, or bump its quantity if already in the cart."""
        if not product_id or not isinstance(product_id, str):
            raise ValueError(ERROR_INVALID_PRODUCT_ID)
        if not name or not isinstance(name, str):
            raise ValueError(ERROR_INVALID_NAME)
        # Strings are rejected here; only remote documents may carry string prices
        if not isinstance(unit_price, (int, float, Decimal)):
            raise ValueError(ERROR_INVALID_PRICE)
        try:
            price = parse_money(unit_price)
        except ValueError:
            raise ValueError(ERROR_INVALID_PRICE) from None
        if price < 0:
            raise ValueError(ERROR_INVALID_PRICE)

        existing = self.get_item(product_id)
        if existing:
            existing.quantity += 1
        else:
            self._items.append(LineItem(product_id=product_id, name=name, unit_price=price))

        self._save_cart()
        self._notify_listeners()

    def remove_item(self, product_id: str) -> None:
        """Remove a product line entirely. Unknown ids are ignored."""
        self._items = [item for item in self._items if item.product_id != product_id]
        self._save_cart()
        self._notify_listeners()

    async def clear_cart(self) -> None:
        """Empty the cart locally, then overwrite the remote copy (best effort)."""
        self._items = []
        user_id = self._user_id
        self._notify_listeners()

        if user_id is not None:
            try:
                await self._documents.save_cart(user_id, [])
                logger.info("Remote cart cleared")
            except Exception as e:
                logger.error(f"Error clearing remote cart: {e}", exc_info=True)

    async def place_order(self) -> str:
        """
        Create a Pending order from the current cart.

        The cart is NOT cleared; call clear_cart() once the order is confirmed.

        Returns:
            Id of the created order

        Raises:
            InvalidOperation: cart is empty or no user is signed in
        """
        if self._user_id is None or not self._items:
            raise InvalidOperation(ERROR_CART_EMPTY_OR_UNAUTHENTICATED)

        order = Order(
            user_id=self._user_id,
            items=serialize_items(self._items),
            total_price=self.total_price,
            item_count=self.item_count,
        )

        try:
            order_id = await self._documents.create_order(order)
        except Exception as e:
            logger.error(f"Error placing order: {e}", exc_info=True)
            raise

        logger.info(f"Order {sanitize_id_for_logging(order_id)} placed: {order.item_count} items")
        return order_id

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _save_cart(self) -> None:
        if self._user_id is None:
            return
        # Snapshot now; later mutations schedule their own write
        self._schedule(self._write_cart(self._user_id, serialize_items(self._items)), "cart save")

    async def _write_cart(self, user_id: str, payload: list[dict]) -> None:
        try:
            await self._documents.save_cart(user_id, payload)
            logger.debug("Cart saved successfully")
        except Exception as e:
            logger.error(
                f"Error saving cart for user {sanitize_id_for_logging(user_id)}: {e}",
                exc_info=True,
            )

    def _schedule(self, coro: Coroutine[Any, Any, None], action: str) -> bool:
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            logger.warning(f"No running event loop, skipped {action}")
            return False
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def wait_for_pending(self) -> None:
        """Wait for in-flight fetches and saves, including ones they trigger."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """Stop listening to identity changes and drop all listeners.

        In-flight saves still complete; in-flight fetches are ignored.
        """
        if self._disposed:
            return
        self._disposed = True
        self._generation += 1
        if self._unsubscribe_identity is not None:
            self._unsubscribe_identity()
            self._unsubscribe_identity = None
        self._listeners.clear()
        logger.info("CartStore disposed")


async def create_cart_store(backend: Optional[str] = None) -> CartStore:
    """Wire a CartStore to Supabase auth and the configured storage backend."""
    client = await get_supabase()
    documents = get_document_store(backend, supabase_client=client)
    return CartStore(SupabaseIdentityProvider(client.auth), documents)
