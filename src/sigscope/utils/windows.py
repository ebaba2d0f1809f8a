"""Helpers for working with sliding windows over sequences."""

from __future__ import annotations

from typing import Iterator, List, Sequence

import numpy as np

from ..types import Window


def iter_windows(length: int, size: int, step: int = 1, *, pad: bool = False) -> Iterator[Window]:
    """Yield ``Window`` objects describing slices of a sequence of ``length``.

    ``size`` is the window length and ``step`` controls how far the window
    advances each iteration.  Without ``pad`` only windows that fit entirely
    inside the sequence are produced.  With ``pad`` the walk continues until
    the end of the sequence is covered, so the final window may extend past
    ``length`` (the caller zero-fills the overhang).  ``ValueError`` is raised
    if the arguments are not sensible.
    """

    if size <= 0 or step <= 0:
        raise ValueError("size and step must be positive")
    if length < 0:
        raise ValueError("length must not be negative")
    if not pad:
        if size > length:
            raise ValueError("size larger than data")
        for start in range(0, length - size + 1, step):
            yield Window(start, start + size)
        return

    start = 0
    while True:
        yield Window(start, start + size)
        if start + size >= length:
            break
        start += step


def window_slices(data: Sequence[float], size: int, step: int = 1, *, pad: bool = False) -> List[np.ndarray]:
    """Return the subsequences for each sliding window.

    Windows that run past the end of ``data`` are zero padded to ``size``.
    """

    arr = np.asarray(data, dtype=float)
    out: List[np.ndarray] = []
    for w in iter_windows(arr.size, size, step, pad=pad):
        segment = np.zeros(size, dtype=float)
        chunk = arr[w.start : min(w.end, arr.size)]
        segment[: chunk.size] = chunk
        out.append(segment)
    return out
