"""
Cart Manager - the customer's pending order, held on the device.

Quantities are bounded by the stock figure of the product snapshot in the
cart. Out-of-range requests are clamped rather than rejected wherever the
input comes from a user, since stock may change between page load and
interaction. Every mutation persists the full cart through the storage port.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from .models import CartItem, ProductSnapshot
from .storage import CartStorage, MemoryCartStorage

logger = logging.getLogger(__name__)


def _require_int(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise TypeError(f"quantity must be an integer, got {type(quantity).__name__}")
    return quantity


class Cart:
    """
    Ordered collection of (product, quantity) lines, one per product.
    """

    def __init__(self, storage: Optional[CartStorage] = None):
        self.storage = storage if storage is not None else MemoryCartStorage()
        self._items: List[CartItem] = self._load()

    def _load(self) -> List[CartItem]:
        try:
            items = [CartItem.from_dict(entry) for entry in self.storage.load()]
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            logger.warning(f"Stored cart is corrupt, starting empty: {e}")
            self.storage.save([])
            return []
        return [item for item in items if item.quantity >= 1]

    def _persist(self) -> None:
        self.storage.save([item.to_dict() for item in self._items])

    def _find(self, product_id: int) -> Optional[CartItem]:
        for item in self._items:
            if item.product.id == product_id:
                return item
        return None

    @property
    def items(self) -> List[CartItem]:
        return [CartItem(item.product, item.quantity) for item in self._items]

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self.items)

    def quantity_for(self, product_id: int) -> int:
        item = self._find(product_id)
        return item.quantity if item else 0

    def available_stock(self, product: ProductSnapshot) -> int:
        """How many more units of ``product`` can still be added."""
        return max(0, product.stock_quantity - self.quantity_for(product.id))

    def add(self, product: ProductSnapshot, quantity: int) -> bool:
        """
        Add ``quantity`` units, clamped to the product's stock.

        An existing line takes the new snapshot and is trimmed to its stock
        first, so a lower stock figure shrinks the line.

        Returns:
            True if at least one unit was added, False if the line was
            already at the stock limit (or nothing was requested)
        """
        _require_int(quantity)
        existing = self._find(product.id)

        if existing is None:
            final = min(quantity, product.stock_quantity)
            if final <= 0:
                return False
            self._items.append(CartItem(product, final))
            self._persist()
            return True

        # Adopt the fresh snapshot and clamp to it even when nothing is added
        current = min(existing.quantity, product.stock_quantity)
        final = min(current + max(quantity, 0), product.stock_quantity)
        changed = existing.product != product or existing.quantity != final

        existing.product = product
        existing.quantity = final
        if final <= 0:
            self._items.remove(existing)

        if changed:
            self._persist()
        return final > current

    def update_quantity(self, product_id: int, quantity: int) -> bool:
        """
        Set a line's quantity exactly.

        Rejects (returns False) quantities above stock; zero or less removes
        the line.
        """
        _require_int(quantity)
        item = self._find(product_id)
        if item is None:
            return False

        if quantity > item.product.stock_quantity:
            return False

        if quantity <= 0:
            self.remove(product_id)
            return True

        item.quantity = quantity
        self._persist()
        return True

    def set_quantity_with_auto_correct(self, product_id: int, quantity: int) -> int:
        """
        Set a line's quantity from free-text input, clamped to [1, stock].

        Returns:
            The quantity actually applied, 0 if there is no such line or the
            product has no stock left (the line is then removed)
        """
        _require_int(quantity)
        item = self._find(product_id)
        if item is None:
            return 0

        corrected = min(max(1, quantity), item.product.stock_quantity)
        if corrected <= 0:
            self.remove(product_id)
            return 0

        item.quantity = corrected
        self._persist()
        return corrected

    def remove(self, product_id: int) -> None:
        self._items = [item for item in self._items if item.product.id != product_id]
        self._persist()

    def clear(self) -> None:
        self._items = []
        self._persist()

    def refresh(self, products: Iterable[ProductSnapshot]) -> List[int]:
        """
        Reconcile the cart against a fresh catalog listing.

        Snapshots are replaced by the fresh ones and quantities clamped to
        the new stock. Lines whose product is gone, inactive or out of stock
        are dropped.

        Returns:
            IDs of products whose line was changed or dropped
        """
        latest: Dict[int, ProductSnapshot] = {p.id: p for p in products}
        changed = []
        kept = []

        for item in self._items:
            fresh = latest.get(item.product.id)
            if fresh is None or not fresh.is_active or fresh.stock_quantity <= 0:
                changed.append(item.product.id)
                continue
            quantity = min(item.quantity, fresh.stock_quantity)
            if quantity != item.quantity:
                changed.append(item.product.id)
            kept.append(CartItem(fresh, quantity))

        self._items = kept
        self._persist()
        if changed:
            logger.info(f"Cart reconciled against catalog, adjusted products: {changed}")
        return changed

    def total(self) -> Decimal:
        return sum((item.line_total for item in self._items), Decimal('0.00'))

    def count(self) -> int:
        return sum(item.quantity for item in self._items)
