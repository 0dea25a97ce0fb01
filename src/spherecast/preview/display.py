"""Matplotlib-based display of rendered frames.

Used to inspect single frames and to compare two renders side by side, for
instance the last-writer and nearest-hit resolution modes.

Example:
    >>> from spherecast.preview.display import show_comparison
    >>> rmse = show_comparison(last_writer_frame, nearest_frame,
    ...                        labels=("last writer", "nearest hit"))
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def frame_difference(
    image_a: npt.NDArray,
    image_b: npt.NDArray,
    diff_scale: float = 4.0,
) -> tuple[npt.NDArray[np.uint8], float]:
    """Amplified absolute difference of two frames and their RMSE.

    Args:
        image_a: First frame (height, width, 3), channels in [0, 255].
        image_b: Second frame of the same shape.
        diff_scale: Amplification applied to the difference image.

    Returns:
        Tuple (difference image as uint8, RMSE in channel units).

    Raises:
        ValueError: If the shapes differ.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes differ: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    rmse = float(np.sqrt(np.mean(diff**2)))
    amplified = np.clip(np.abs(diff) * diff_scale, 0.0, 255.0).astype(np.uint8)
    return amplified, rmse


def show_frame(
    image: npt.NDArray,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (6, 6),
    block: bool = True,
) -> None:
    """Display a single frame in a Matplotlib figure."""
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(np.asarray(image, dtype=np.uint8))
    ax.axis("off")
    if title is not None:
        ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray,
    image_b: npt.NDArray,
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 4.0,
    figsize: tuple[float, float] = (15, 5),
    block: bool = True,
) -> float:
    """Display two frames and their amplified difference side by side.

    Returns:
        RMSE between the two frames in channel units.
    """
    import matplotlib.pyplot as plt

    diff, rmse = frame_difference(image_a, image_b, diff_scale)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(np.asarray(image_a, dtype=np.uint8))
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(np.asarray(image_b, dtype=np.uint8))
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.3f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
