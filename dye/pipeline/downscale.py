from __future__ import annotations

import cv2
import numpy as np


def cell_grid_size(height: int, width: int, columns: int) -> tuple[int, int]:
    """Pixel size (rows, columns) an image is resampled to for ``columns`` cells.

    A terminal cell is about twice as tall as it is wide and shows two pixels
    stacked vertically, so the pixel grid keeps the image aspect ratio with an
    even number of rows.
    """
    assert height > 0 and width > 0 and columns > 0
    rows = max(2, int(round(columns * height / width)))
    rows += rows % 2
    return rows, columns


def downscale_area(image: np.ndarray, columns: int) -> np.ndarray:
    """Downscale using area averaging to fit ``columns`` terminal cells.

    Args:
        image: H x W x 3 uint8 RGB.
        columns: Output width in pixels (one per terminal column).

    Returns:
        rows x columns x 3 uint8 RGB, rows even.
    """
    rows, columns = cell_grid_size(image.shape[0], image.shape[1], columns)
    interpolation = cv2.INTER_AREA if columns <= image.shape[1] else cv2.INTER_NEAREST
    return cv2.resize(image, (columns, rows), interpolation=interpolation)
