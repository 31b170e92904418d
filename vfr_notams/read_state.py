"""Read/unread bookkeeping for NOTAMs."""

import json
import logging
from pathlib import Path
from typing import Iterable, Protocol, Set, Union

logger = logging.getLogger(__name__)


class ReadStateOracle(Protocol):
    """Anything that can tell whether the user has already seen a NOTAM."""

    def is_read(self, number: str) -> bool:
        ...


class NotamReadState:
    """
    Set of NOTAM numbers the user has marked as read.

    Example:
        state = NotamReadState.load("read_notams.json")
        state.mark_read("A0123/24")
        state.save("read_notams.json")
    """

    def __init__(self, numbers: Iterable[str] = ()):
        self._numbers: Set[str] = set(numbers)

    def is_read(self, number: str) -> bool:
        return number in self._numbers

    def mark_read(self, number: str, read: bool = True) -> None:
        if read:
            self._numbers.add(number)
        else:
            self._numbers.discard(number)

    def retain(self, numbers: Iterable[str]) -> None:
        """Forget every number not in ``numbers``, e.g. NOTAMs no longer known."""
        self._numbers &= set(numbers)

    @property
    def numbers(self) -> Set[str]:
        return set(self._numbers)

    def save(self, path: Union[str, Path]) -> None:
        with open(path, 'w') as f:
            json.dump(sorted(self._numbers), f)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'NotamReadState':
        """Load from a JSON file; a missing or malformed file gives an empty state."""
        path = Path(path)
        if not path.exists():
            return cls()
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in read state file {path}: {e}")
            return cls()
        if not isinstance(data, list):
            logger.warning(f"Read state file {path} does not contain a list")
            return cls()
        return cls(str(n) for n in data)

    def __len__(self) -> int:
        return len(self._numbers)

    def __repr__(self) -> str:
        return f"NotamReadState(count={len(self._numbers)})"
