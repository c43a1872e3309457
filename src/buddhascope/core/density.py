"""
Log-density tone mapping.

Turns the unbounded per-cell statistics of a canvas into display bytes. A
cell hit ``n`` times is scaled by ``log10(n) / n``: the mean contribution per
hit, weighted by how often the cell was visited on a log scale. A cell hit
exactly once therefore renders black.
"""

import numpy as np

from buddhascope.core.canvas import BLUE, HITS, RED, Canvas


def largest_hit_count(canvas: Canvas) -> float:
    """Maximum hit count over the canvas (0.0 when nothing was hit)."""
    hits = canvas.accum[..., HITS]
    if hits.size == 0:
        return 0.0
    return max(float(hits.max()), 0.0)


def log_density_normalize(canvas: Canvas) -> float:
    """
    Write tone-mapped colors into ``canvas.rgb`` for every cell with hits.

    Cells without hits keep whatever display bytes they already have.

    Returns:
        The largest hit count. It does not enter the per-cell curve and is
        reported for information only.
    """
    largest = largest_hit_count(canvas)

    accum = canvas.accum
    hits = accum[..., HITS]
    mask = hits > 0
    if not np.any(mask):
        return largest

    n = hits[mask]
    dense = np.log10(n) / n

    channels = accum[mask][:, RED:BLUE + 1] * dense[:, np.newaxis]
    channels = np.clip(channels, 0.0, 1.0)

    canvas.rgb[mask] = (channels * 255).astype(np.uint8)
    return largest
