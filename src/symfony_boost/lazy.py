from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class Lazy(Generic[T]):
    """Holds a value built by ``factory`` on first access and reused afterwards.

    The server loop is single-threaded, so there is no lock. A factory that
    raises leaves the cell empty and the next access retries.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._value: Optional[T] = None
        self._ready = False

    def get(self) -> T:
        if not self._ready:
            self._value = self._factory()
            self._ready = True
        return self._value  # type: ignore[return-value]

    @property
    def initialized(self) -> bool:
        return self._ready

    def peek(self) -> Optional[T]:
        return self._value if self._ready else None
