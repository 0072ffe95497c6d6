from __future__ import annotations
from typing import Any, Callable, Dict, List

from .errors import InvalidParameter


class _Registry:
    """Named implementations, filled in by adapter packages at import time.

    `field` is the request field whose values index the registry; lookups of
    unknown names raise `InvalidParameter` naming that field.
    """

    def __init__(self, field: str) -> None:
        self.field = field
        self._items: Dict[str, Any] = {}

    def register(self, name: str) -> Callable[[Any], Any]:
        def _inner(cls_or_obj: Any) -> Any:
            if name in self._items:
                raise ValueError(f"{self.field} '{name}' is already registered")
            self._items[name] = cls_or_obj
            return cls_or_obj
        return _inner

    def get(self, name: str) -> Any:
        try:
            return self._items[name]
        except KeyError:
            raise InvalidParameter(self.field, name, self.names()) from None

    def names(self) -> List[str]:
        return list(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def list(self) -> Dict[str, Any]:
        return dict(self._items)


# KEM backend factories keyed by param set ("ml_kem_768", ...)
kem_registry = _Registry("param_set")
# Circuit definitions keyed by circuit id ("multiply", ...)
circuit_registry = _Registry("circuit_id")
