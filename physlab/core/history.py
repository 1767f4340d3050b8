"""In-memory record of per-tick values (trails, energy plots) with export."""

from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional, Union

import numpy as np


class SimHistory:
    """
    Bounded buffer of named series, one record per tick.

    With max_length set, the oldest records are dropped first, which is how
    trails and the rolling energy plot are kept short.
    """

    def __init__(self, max_length: Optional[int] = None) -> None:
        """
        Args:
            max_length: number of records to keep (None = unbounded).
        """
        if max_length is not None and max_length <= 0:
            raise ValueError(f"max_length must be positive, got {max_length}")
        self._max_length = max_length
        self._data: Dict[str, Deque[Any]] = {}
        self._count = 0

    def append(self, **kwargs: Any) -> None:
        """Record one tick (key -> value)."""
        for key, value in kwargs.items():
            if key not in self._data:
                self._data[key] = deque(maxlen=self._max_length)
            if isinstance(value, np.ndarray):
                value = value.copy()
            self._data[key].append(value)
        self._count = max((len(s) for s in self._data.values()), default=0)

    def clear(self) -> None:
        self._data.clear()
        self._count = 0

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def get(self, key: str) -> np.ndarray:
        """Series for a key as a numpy array (empty if unknown)."""
        if key not in self._data:
            return np.array([])
        return np.array(list(self._data[key]))

    def last(self, key: str) -> Any:
        series = self._data.get(key)
        if not series:
            raise KeyError(key)
        return series[-1]

    def to_dict(self, keys: Optional[List[str]] = None) -> Dict[str, np.ndarray]:
        keys = keys or self.keys()
        return {k: self.get(k) for k in keys if k in self._data}

    def to_csv(
        self,
        path: Union[str, Path],
        keys: Optional[List[str]] = None,
        delimiter: str = ",",
    ) -> None:
        """
        Export to CSV, one row per tick. Vector-valued series are expanded
        into key_0, key_1, ... columns.
        """
        path = Path(path)
        keys = keys or self.keys()
        columns: List[np.ndarray] = []
        header: List[str] = []
        for key in keys:
            arr = self.get(key)
            if arr.ndim <= 1:
                columns.append(arr.reshape(-1, 1))
                header.append(key)
            else:
                flat = arr.reshape(arr.shape[0], -1)
                columns.append(flat)
                header.extend(f"{key}_{i}" for i in range(flat.shape[1]))
        if not columns:
            path.write_text("", encoding="utf-8")
            return
        lengths = {key: col.shape[0] for key, col in zip(keys, columns)}
        if len(set(lengths.values())) > 1:
            raise ValueError(f"series have different lengths, cannot export to CSV: {lengths}")
        table = np.hstack(columns).astype(float)
        np.savetxt(path, table, delimiter=delimiter, header=delimiter.join(header), comments="")

    def __len__(self) -> int:
        return self._count
