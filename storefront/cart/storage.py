"""
Persistence adapter for the cart.

Owns one record in a key-value store. Writes are best-effort (failures are
logged, never raised). Reads validate the record and discard anything that
does not decode to a well-formed cart.
"""
import json
from dataclasses import dataclass
from typing import Optional

from storefront.db import KeyValueStore, StorageKeys
from storefront.errors import ERROR_CORRUPTED_RECORD, ERROR_STORAGE_UNAVAILABLE
from storefront.logging import get_logger
from .models import CartItem, CartState

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoadResult:
    """Outcome of decoding a stored record."""
    ok: bool
    state: Optional[CartState] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, state: CartState) -> "LoadResult":
        return cls(ok=True, state=state)

    @classmethod
    def failure(cls, error: str) -> "LoadResult":
        return cls(ok=False, error=error)


def encode(state: CartState) -> str:
    return json.dumps(state.to_dict())


def decode(raw: str | bytes) -> LoadResult:
    """
    Schema-checked deserialization of a stored record.

    Only `items` is read; stored totals are ignored and recomputed.
    """
    try:
        data = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as e:
        return LoadResult.failure(f"not JSON: {e}")

    if not isinstance(data, dict):
        return LoadResult.failure("record is not an object")

    raw_items = data.get("items")
    if not isinstance(raw_items, list):
        return LoadResult.failure("items missing or not a list")

    items: list[CartItem] = []
    seen = set()
    for position, entry in enumerate(raw_items):
        if not isinstance(entry, dict):
            return LoadResult.failure(f"item {position} is not an object")
        try:
            item = CartItem.from_dict(entry)
        except KeyError as e:
            return LoadResult.failure(f"item {position} missing field {e}")
        except (TypeError, ValueError, ArithmeticError, RecursionError) as e:
            return LoadResult.failure(f"item {position}: {e}")
        if item.id in seen:
            return LoadResult.failure(f"item {position} duplicates id")
        seen.add(item.id)
        items.append(item)

    try:
        state = CartState.from_items(items)
    except ArithmeticError as e:
        return LoadResult.failure(f"totals out of range: {e}")
    return LoadResult.success(state)


class CartPersistence:
    """
    Saves and rehydrates CartState under a fixed key.

    Usage:
        persistence = CartPersistence(MemoryStore())
        persistence.save(state)
        state = persistence.load()
    """

    def __init__(self, store: KeyValueStore, key: str = StorageKeys.CART):
        self._store = store
        self.key = key

    def save(self, state: CartState) -> bool:
        """
        Write the full state.

        Returns:
            True if written, False if the backend failed (logged, not raised)
        """
        try:
            self._store.set(self.key, encode(state))
            return True
        except Exception as e:
            logger.error(f"{ERROR_STORAGE_UNAVAILABLE}: failed to save cart under {self.key}: {e}")
            return False

    def load(self) -> CartState:
        """
        Read the stored state.

        Returns:
            Rehydrated state, or the empty state when the record is absent,
            unreadable or corrupted (a corrupted record is deleted)
        """
        try:
            raw = self._store.get(self.key)
        except Exception as e:
            logger.error(f"{ERROR_STORAGE_UNAVAILABLE}: failed to load cart under {self.key}: {e}")
            return CartState.empty()

        if not raw:
            return CartState.empty()

        result = decode(raw)
        if not result.ok:
            logger.warning(f"{ERROR_CORRUPTED_RECORD} under {self.key}, discarding: {result.error}")
            self._discard()
            return CartState.empty()

        logger.info(f"Cart rehydrated: {result.state.total_items} item(s)")
        return result.state

    def _discard(self) -> None:
        try:
            self._store.delete(self.key)
        except Exception as e:
            logger.error(f"Failed to delete corrupted cart record {self.key}: {e}")
