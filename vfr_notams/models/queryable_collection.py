"""
Immutable queryable collection for fluent, composable queries.

Results are always new collections built through ``_new_collection``, so
subclasses that carry extra state (a region, a timestamp) keep it across
chained queries.
"""

from typing import TypeVar, Generic, Callable, List, Dict, Optional, Any, Iterable, Iterator, Tuple

T = TypeVar('T')


class QueryableCollection(Generic[T]):
    """
    A lightweight, chainable, read-only collection of in-memory items.

    Examples:
        # Basic filtering
        collection.filter(lambda n: n.is_permanent).all()

        # Attribute matching
        collection.where(location='ELLX').first()

        # Sorting
        collection.order_by(lambda n: n.effective_start).take(10).all()
    """

    def __init__(self, items: Iterable[T] = ()):
        self._items: Tuple[T, ...] = tuple(items)

    def _new_collection(self, items: Iterable[T]) -> 'QueryableCollection[T]':
        """Create a collection of the same kind holding other items."""
        return self.__class__(items)

    def filter(self, predicate: Callable[[T], bool]) -> 'QueryableCollection[T]':
        """
        Filter items using a predicate function.

        Args:
            predicate: Function that takes an item and returns True to include it

        Returns:
            New collection with filtered items
        """
        return self._new_collection(item for item in self._items if predicate(item))

    def where(self, **kwargs) -> 'QueryableCollection[T]':
        """
        Filter items using keyword arguments (attribute matching).
        All conditions must match (AND logic).
        """
        def matches(item: T) -> bool:
            return all(
                getattr(item, key, None) == value
                for key, value in kwargs.items()
            )
        return self.filter(matches)

    def first(self) -> Optional[T]:
        """Return the first item or None if collection is empty."""
        return self._items[0] if self._items else None

    def all(self) -> List[T]:
        """Return all items as a new list."""
        return list(self._items)

    def count(self) -> int:
        return len(self._items)

    def exists(self) -> bool:
        return len(self._items) > 0

    def is_empty(self) -> bool:
        return len(self._items) == 0

    def any(self, predicate: Callable[[T], bool]) -> bool:
        return any(predicate(item) for item in self._items)

    def all_match(self, predicate: Callable[[T], bool]) -> bool:
        return all(predicate(item) for item in self._items)

    def group_by(self, key_func: Callable[[T], Any]) -> Dict[Any, List[T]]:
        """
        Group items by a key function.

        Returns:
            Dictionary mapping keys to lists of items, in first-seen order
        """
        result: Dict[Any, List[T]] = {}
        for item in self._items:
            result.setdefault(key_func(item), []).append(item)
        return result

    def order_by(self, key_func: Callable[[T], Any], reverse: bool = False) -> 'QueryableCollection[T]':
        """Stable sort by a key function."""
        return self._new_collection(sorted(self._items, key=key_func, reverse=reverse))

    def take(self, n: int) -> 'QueryableCollection[T]':
        return self._new_collection(self._items[:n])

    def distinct_by(self, key_func: Callable[[T], Any]) -> 'QueryableCollection[T]':
        """
        Return distinct items based on a key function.

        Returns:
            New collection with distinct items (first occurrence kept)
        """
        seen = set()
        result = []
        for item in self._items:
            key = key_func(item)
            if key not in seen:
                seen.add(key)
                result.append(item)
        return self._new_collection(result)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index):
        """Allow indexing and slicing."""
        if isinstance(index, slice):
            return self._new_collection(self._items[index])
        return self._items[index]

    def __bool__(self) -> bool:
        return len(self._items) > 0

    def __repr__(self) -> str:
        """Class name, the identifiers of the first few items and the count."""
        class_name = self.__class__.__name__
        count = len(self._items)
        if count == 0:
            return f"{class_name}([])"

        preview_items = []
        for item in self._items[:3]:
            if hasattr(item, 'number'):
                preview_items.append(repr(item.number))
            else:
                preview_items.append(f"<{type(item).__name__}>")
        if count > 3:
            preview_items.append('...')

        return f"{class_name}([{', '.join(preview_items)}], count={count})"
