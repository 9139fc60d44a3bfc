from __future__ import annotations

import logging
from typing import Any

import numpy as np

from .config import EncodingConfig
from .errors import SizeMismatchError


logger = logging.getLogger(__name__)

_CHANNEL_ORDERS = ("BGR", "RGB")


def _flat_view(destination: Any) -> np.ndarray:
    """
    1-D float view sharing memory with `destination` (NumPy array or writable buffer).
    """

    if isinstance(destination, np.ndarray):
        if not destination.flags.c_contiguous:
            raise ValueError("destination tensor must be C-contiguous")
        flat = destination.reshape(-1)
    else:
        try:
            flat = np.asarray(memoryview(destination)).reshape(-1)
        except TypeError as e:
            raise TypeError(
                f"destination must be a NumPy array or a writable buffer, got {type(destination).__name__}"
            ) from e

    if not np.issubdtype(flat.dtype, np.floating):
        raise TypeError(f"destination tensor must hold floats, got dtype {flat.dtype}")
    if not flat.flags.writeable:
        raise ValueError("destination tensor is read-only")
    return flat


def _to_three_channels(image: np.ndarray) -> np.ndarray:
    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]
    if image.ndim == 2:
        return np.stack([image, image, image], axis=2)
    if image.ndim == 3 and image.shape[2] == 4:
        return image[:, :, :3]
    if image.ndim == 3 and image.shape[2] == 3:
        return image
    raise ValueError(f"Expected image shape (H, W), (H, W, 3) or (H, W, 4), got {image.shape}")


class TensorEncoder:
    """
    Resample an image to the network input size and write a channel-planar
    float tensor: [R plane, G plane, B plane], each row-major, values in [0, 1].

    Resampling uses OpenCV's Lanczos (8x8 windowed sinc) filter; nearest or
    bilinear resizing loses small objects. Output is therefore close to, but
    not bit-identical with, other Lanczos implementations.

    `channel_order` describes the incoming image: "BGR" for `cv2.imread`
    frames, "RGB" for PIL/imageio arrays. Grayscale and alpha images are
    accepted; 16-bit images are reduced to their high byte.
    """

    def __init__(self, cfg: EncodingConfig, channel_order: str = "BGR"):
        order = channel_order.upper()
        if order not in _CHANNEL_ORDERS:
            raise ValueError(f"channel_order must be one of {_CHANNEL_ORDERS}, got {channel_order!r}")
        self.cfg = cfg
        self.channel_order = order

    def encode(self, image: np.ndarray, destination: Any) -> None:
        """
        Fill `destination` with the encoded image.

        Raises SizeMismatchError (leaving `destination` untouched) when it holds
        fewer than 3 * target_height * target_width values. Only that prefix is
        written if the buffer is larger. The input image is never modified.
        """

        flat = _flat_view(destination)
        required = self.cfg.tensor_size
        if flat.size < required:
            raise SizeMismatchError(flat.size, required)

        planes = self._planes(image)
        flat[:required] = planes.reshape(-1)

    def blob(self, image: np.ndarray) -> np.ndarray:
        """
        Allocate and fill a float32 tensor shaped (1, 3, H, W).
        """

        out = np.empty(self.cfg.tensor_shape, dtype=np.float32)
        self.encode(image, out)
        return out

    # ------------------------------------------------------------------ #
    # Helper internal
    # ------------------------------------------------------------------ #
    def _planes(self, image: np.ndarray) -> np.ndarray:
        if image is None or not hasattr(image, "shape"):
            raise TypeError("image must be a NumPy array.")

        img = _to_three_channels(np.asarray(image))
        if img.dtype == np.uint16:
            img = img >> 8
        elif img.dtype != np.uint8:
            raise ValueError(f"Expected a uint8 or uint16 image, got dtype {img.dtype}")
        img = np.ascontiguousarray(img, dtype=np.uint8)

        h, w = img.shape[:2]
        if h == 0 or w == 0:
            raise ValueError(f"Cannot encode an empty image of shape {img.shape}")

        resized = self._resize(img)
        if self.channel_order == "BGR":
            resized = resized[:, :, ::-1]

        logger.debug(
            "encoded %dx%d image into %dx%d tensor",
            w,
            h,
            self.cfg.target_width,
            self.cfg.target_height,
        )
        # HWC -> CHW, normalize
        return np.transpose(resized, (2, 0, 1)).astype(np.float32) / 255.0

    def _resize(self, img: np.ndarray) -> np.ndarray:
        target = (self.cfg.target_width, self.cfg.target_height)
        if (img.shape[1], img.shape[0]) == target:
            return img

        try:
            import cv2  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError("OpenCV is required for resampling. Install with `pip install opencv-python`.") from e

        return cv2.resize(img, target, interpolation=cv2.INTER_LANCZOS4)


def encode(image: np.ndarray, destination: Any, cfg: EncodingConfig, channel_order: str = "BGR") -> None:
    TensorEncoder(cfg, channel_order=channel_order).encode(image, destination)
