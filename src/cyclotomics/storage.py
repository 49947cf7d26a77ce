# src/cyclotomics/storage.py
"""
Coefficient stores: exponent -> coefficient maps of a fixed size n.

DenseCoeffs keeps a list of length n; SparseCoeffs keeps a dict of the
nonzero entries only. Both satisfy CoeffStore and compare equal whenever
their nonzero entries agree. Exponents are reduced mod n by the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Protocol


class CoeffStore(Protocol):
    size: int
    is_sparse: bool

    def __getitem__(self, e: int) -> Any: ...
    def __setitem__(self, e: int, v: Any) -> None: ...
    def items(self) -> Iterator[tuple[int, Any]]: ...
    def keys(self) -> Iterator[int]: ...
    def zero(self) -> None: ...
    def copy_from(self, other: CoeffStore) -> None: ...
    def copy(self) -> CoeffStore: ...
    def to_dense(self) -> DenseCoeffs: ...
    def to_sparse(self) -> SparseCoeffs: ...


class DenseCoeffs:
    __slots__ = ("_data", "size")
    is_sparse = False

    def __init__(self, size: int, values: Iterable[Any] | None = None):
        self.size = int(size)
        if values is None:
            self._data = [0] * self.size
        else:
            self._data = list(values)
            if len(self._data) != self.size:
                raise ValueError(f"expected {self.size} coefficients, got {len(self._data)}")

    def __getitem__(self, e: int) -> Any:
        return self._data[e]

    def __setitem__(self, e: int, v: Any) -> None:
        self._data[e] = v

    def get(self, e: int) -> Any:
        return self._data[e]

    def set(self, e: int, v: Any) -> None:
        self._data[e] = v

    def items(self) -> Iterator[tuple[int, Any]]:
        return ((e, c) for e, c in enumerate(self._data) if c != 0)

    def keys(self) -> Iterator[int]:
        return (e for e, c in enumerate(self._data) if c != 0)

    def zero(self) -> None:
        for e in range(self.size):
            self._data[e] = 0

    def copy_from(self, other: CoeffStore) -> None:
        if isinstance(other, DenseCoeffs):
            self._data[:] = other._data
            return
        self.zero()
        for e, c in other.items():
            self._data[e] = c

    def copy(self) -> DenseCoeffs:
        return DenseCoeffs(self.size, self._data)

    def to_dense(self) -> DenseCoeffs:
        return self.copy()

    def to_sparse(self) -> SparseCoeffs:
        return SparseCoeffs(self.size, self.items())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DenseCoeffs):
            return self._data == other._data
        if isinstance(other, SparseCoeffs):
            return self.size == other.size and dict(self.items()) == other._data
        return NotImplemented

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"DenseCoeffs({self.size}, {self._data!r})"


class SparseCoeffs:
    __slots__ = ("_data", "size")
    is_sparse = True

    def __init__(self, size: int, entries: Iterable[tuple[int, Any]] | None = None):
        self.size = int(size)
        self._data: dict[int, Any] = {}
        if entries is not None:
            for e, c in entries:
                if c != 0:
                    self._data[e] = c

    def __getitem__(self, e: int) -> Any:
        return self._data.get(e, 0)

    def __setitem__(self, e: int, v: Any) -> None:
        if v == 0:
            self._data.pop(e, None)
        else:
            self._data[e] = v

    get = __getitem__
    set = __setitem__

    def items(self) -> Iterator[tuple[int, Any]]:
        return iter(sorted(self._data.items()))

    def keys(self) -> Iterator[int]:
        return iter(sorted(self._data))

    def zero(self) -> None:
        self._data.clear()

    def copy_from(self, other: CoeffStore) -> None:
        if other is self:
            return
        self._data = dict(other.items())

    def copy(self) -> SparseCoeffs:
        return SparseCoeffs(self.size, self._data.items())

    def to_dense(self) -> DenseCoeffs:
        out = DenseCoeffs(self.size)
        out.copy_from(self)
        return out

    def to_sparse(self) -> SparseCoeffs:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SparseCoeffs):
            return self.size == other.size and self._data == other._data
        if isinstance(other, DenseCoeffs):
            return other == self
        return NotImplemented

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"SparseCoeffs({self.size}, {dict(sorted(self._data.items()))!r})"


def new_store(size: int, *, sparse: bool) -> CoeffStore:
    return SparseCoeffs(size) if sparse else DenseCoeffs(size)
