"""Chunked thread-pool evaluation for the embarrassingly parallel inner passes."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable

import numpy as np


def map_row_chunks(
    func: Callable[[np.ndarray], np.ndarray],
    rows: np.ndarray,
    *,
    workers: int = 1,
) -> np.ndarray:
    """Apply ``func`` to row chunks of ``rows`` and concatenate the results in order.

    With a single worker (or too few rows to split) the function is applied
    directly on the calling thread.
    """
    if workers <= 1 or len(rows) < 2 * workers:
        return func(rows)

    chunks = np.array_split(rows, workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        results = list(executor.map(func, chunks))
    return np.concatenate(results)
