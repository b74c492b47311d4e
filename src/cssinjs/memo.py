"""
cssinjs.memo.

Reference-keyed memoization for compile-like functions.

Contract
--------
- `memo(fn)` returns `g` with `g(x) == fn(x)`; for repeated calls with the same
  object `x`, `fn` runs at most once.
- The cache key is object identity, not equality. A structurally equal but
  distinct object is always a miss; the content-addressed registry still
  deduplicates it downstream.
- Lifetime: entries for weak-referenceable keys go away when the key is
  garbage collected. Plain `dict` objects cannot be weakly referenced, so they
  are held strongly for the lifetime of the cache. Use `StyleDict` for
  reachability-tied entries, or pass a `ReferenceCache` scoped to a request.
  `css()` does the latter: it memoizes in the active document's cache.
- There is no invalidation operation; drop the cache to drop its entries.
"""

from __future__ import annotations

import functools
import logging
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

_MISSING: Any = object()


class StyleDict(dict):
    """A `dict` that can be weakly referenced.

    Memo entries keyed by a StyleDict are released together with the dict.
    """

    __slots__ = ("__weakref__",)


@dataclass(slots=True)
class _Entry:
    value: Any
    ref: weakref.ref | None = None
    strong: object = None

    def target(self) -> object:
        return self.ref() if self.ref is not None else self.strong


class ReferenceCache(Generic[V]):
    """Identity-keyed cache with weak keys where the key type allows it.

    Not thread-safe; a lost race only repeats a pure computation.
    """

    __slots__ = ("__weakref__", "_entries")

    def __init__(self) -> None:
        self._entries: dict[int, _Entry] = {}

    def _weak_ref(self, key: object) -> weakref.ref | None:
        key_id = id(key)
        entries = self._entries

        def _evict(ref: weakref.ref) -> None:
            entry = entries.get(key_id)
            # The id may already belong to a newer key; leave that entry alone.
            if entry is not None and entry.ref is ref:
                del entries[key_id]

        try:
            return weakref.ref(key, _evict)
        except TypeError:
            return None

    def get(self, key: object, default: V | None = None) -> V | None:
        """Return the value cached for this exact object, or `default`."""
        entry = self._entries.get(id(key))
        if entry is None or entry.target() is not key:
            return default
        return entry.value

    def set(self, key: object, value: V) -> None:
        """Cache `value` for this exact object."""
        ref = self._weak_ref(key)
        if ref is None:
            self._entries[id(key)] = _Entry(value, strong=key)
        else:
            self._entries[id(key)] = _Entry(value, ref=ref)

    def get_or_create(self, key: K, create: Callable[[K], V]) -> V:
        """Return the value cached for `key`, or compute and cache `create(key)`.

        Exceptions raised by `create` propagate and nothing is cached.
        """
        hit = self.get(key, _MISSING)
        if hit is not _MISSING:
            return hit
        logger.debug("memo miss for %s", getattr(create, "__qualname__", create))
        value = create(key)
        self.set(key, value)
        return value

    def __contains__(self, key: object) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return len(self._entries)


def memo(
    fn: Callable[[K], V], *, cache: ReferenceCache[V] | None = None
) -> Callable[[K], V]:
    """Memoize a single-argument function by argument identity.

    Args:
        fn: Function to wrap. Exceptions it raises propagate and are not cached.
        cache: Optional cache to use instead of a private one, so callers can
            scope entry lifetime (e.g. one cache per request).

    Returns:
        The memoized function. Its cache is available as `.cache`.
    """
    store: ReferenceCache[V] = ReferenceCache() if cache is None else cache

    @functools.wraps(fn)
    def wrapper(x: K) -> V:
        return store.get_or_create(x, fn)

    wrapper.cache = store  # type: ignore[attr-defined]
    return wrapper
