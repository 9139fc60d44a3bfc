from __future__ import annotations

import logging
from typing import Any, List, Tuple

import numpy as np

from .config import DecodingConfig
from .errors import InsufficientBufferError
from .nms import merge_overlapping
from .types import BoundingBox


logger = logging.getLogger(__name__)


class DetectionDecoder:
    """
    Decode a raw YOLOv8/YOLO11 style detection head into labelled boxes.

    The output is read as a row-major matrix of (4 + C) rows by `detection_slots`
    columns (e.g. 84 x 8400 for 80 classes), value (r, c) at offset
    r * detection_slots + c:

    - rows 0..3: cx, cy, w, h in model input pixels
    - rows 4..4+C-1: per-class scores

    Any array-like is accepted (flat float buffer, (1, 84, 8400) tensor, ...);
    values past `required_size` are ignored.
    """

    def __init__(self, cfg: DecodingConfig):
        self.cfg = cfg

    def decode(self, output: Any, original_width: int, original_height: int) -> List[BoundingBox]:
        """
        Convert raw model output into merged detections in original image coordinates.

        Args:
            output: model output for a single image
            original_width/original_height: size of the image before resampling

        Raises InsufficientBufferError when `output` is shorter than
        detection_slots * (4 + num_classes).
        """

        candidates = self.candidates(output, original_width, original_height)
        merged = merge_overlapping(
            candidates,
            iou_threshold=self.cfg.iou_threshold,
            keep_highest_confidence=self.cfg.keep_highest_confidence,
        )
        logger.debug("decoded %d candidates, kept %d after merge", len(candidates), len(merged))
        return merged

    def candidates(self, output: Any, original_width: int, original_height: int) -> List[BoundingBox]:
        """
        Confidence-filtered boxes before the merge pass, in slot order.
        """

        if original_width <= 0 or original_height <= 0:
            raise ValueError("original_width and original_height must be > 0")

        matrix = self._as_matrix(output)
        class_ids, scores = self._best_class(matrix[4:, :])

        keep = scores >= self.cfg.confidence_threshold
        if not np.any(keep):
            return []

        boxes = self._scale_boxes(matrix[0:4, keep], original_width, original_height)
        names = self.cfg.class_names
        return [
            BoundingBox(
                label=names[int(cls_id)],
                confidence=float(score),
                x1=float(x1),
                y1=float(y1),
                x2=float(x2),
                y2=float(y2),
            )
            for (x1, y1, x2, y2), score, cls_id in zip(boxes, scores[keep], class_ids[keep])
        ]

    # ------------------------------------------------------------------ #
    # Helper internal
    # ------------------------------------------------------------------ #
    def _as_matrix(self, output: Any) -> np.ndarray:
        flat = np.asarray(output, dtype=np.float32).reshape(-1)
        required = self.cfg.required_size
        if flat.size < required:
            raise InsufficientBufferError(
                flat.size, required, self.cfg.detection_slots, self.cfg.num_classes
            )
        return flat[:required].reshape(self.cfg.row_count, self.cfg.detection_slots)

    @staticmethod
    def _best_class(class_scores: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        # argmax returns the first maximum, i.e. the lowest class index on ties.
        # NaN scores never win, matching a plain `>` scan.
        cleaned = np.where(np.isnan(class_scores), -np.inf, class_scores)
        class_ids = np.argmax(cleaned, axis=0)
        scores = cleaned[class_ids, np.arange(cleaned.shape[1])]
        return class_ids, scores

    def _scale_boxes(self, cxcywh: np.ndarray, original_width: int, original_height: int) -> np.ndarray:
        """
        Map (4, N) cx, cy, w, h in model space to (N, 4) xyxy in original image pixels.

        The image is assumed to have been stretched to the model size (no
        letterbox padding), so each axis scales independently.
        """

        cx, cy, w, h = cxcywh.astype(np.float64)
        x1 = (cx - w / 2) / self.cfg.model_width * original_width
        y1 = (cy - h / 2) / self.cfg.model_height * original_height
        x2 = (cx + w / 2) / self.cfg.model_width * original_width
        y2 = (cy + h / 2) / self.cfg.model_height * original_height
        return np.stack([x1, y1, x2, y2], axis=1)


def decode(output: Any, cfg: DecodingConfig, original_width: int, original_height: int) -> List[BoundingBox]:
    return DetectionDecoder(cfg).decode(output, original_width, original_height)
