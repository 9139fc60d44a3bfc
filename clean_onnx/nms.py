from typing import List, Sequence

import numpy as np

from .types import BoundingBox


def pairwise_iou(box: np.ndarray, boxes: np.ndarray) -> np.ndarray:
    """
    IoU of one xyxy box (4,) against boxes (N, 4). Corners are canonicalised
    first and a zero union yields 0.
    """

    if boxes.size == 0:
        return np.empty((0,), dtype=np.float64)

    bx1, bx2 = min(box[0], box[2]), max(box[0], box[2])
    by1, by2 = min(box[1], box[3]), max(box[1], box[3])
    x1 = np.minimum(boxes[:, 0], boxes[:, 2])
    x2 = np.maximum(boxes[:, 0], boxes[:, 2])
    y1 = np.minimum(boxes[:, 1], boxes[:, 3])
    y2 = np.maximum(boxes[:, 1], boxes[:, 3])

    w = np.maximum(0.0, np.minimum(bx2, x2) - np.maximum(bx1, x1))
    h = np.maximum(0.0, np.minimum(by2, y2) - np.maximum(by1, y1))
    inter = w * h
    union = (bx2 - bx1) * (by2 - by1) + (x2 - x1) * (y2 - y1) - inter

    iou = np.zeros_like(inter, dtype=np.float64)
    np.divide(inter, union, out=iou, where=union > 0)
    return iou


def merge_overlapping(
    boxes: Sequence[BoundingBox],
    iou_threshold: float = 0.7,
    keep_highest_confidence: bool = False,
) -> List[BoundingBox]:
    """
    Greedy single-pass suppression.

    Candidates are walked in ascending confidence order (stable on ties) and
    a candidate is dropped when its IoU with any already accepted box exceeds
    `iou_threshold`. Walking low confidence first means the weaker box of an
    overlapping pair survives; pass `keep_highest_confidence=True` for the
    usual best-first NMS ordering.
    """

    ordered = sorted(boxes, key=lambda b: b.confidence, reverse=keep_highest_confidence)
    if not ordered:
        return []

    accepted: List[BoundingBox] = []
    accepted_xyxy = np.empty((len(ordered), 4), dtype=np.float64)
    for candidate in ordered:
        xyxy = np.array(candidate.as_xyxy(), dtype=np.float64)
        ious = pairwise_iou(xyxy, accepted_xyxy[: len(accepted)])
        if np.any(ious > iou_threshold):
            continue
        accepted_xyxy[len(accepted)] = xyxy
        accepted.append(candidate)

    return accepted
