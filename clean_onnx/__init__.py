"""
Tensor encoding and detection decoding for fixed-size YOLO-style ONNX models.

The core is inference-engine agnostic: `TensorEncoder` turns an image into the
channel-planar float tensor the network expects, `DetectionDecoder` turns the
raw (4 + C, slots) output back into merged `BoundingBox` results. Only NumPy
and OpenCV are needed.
"""

from .types import BoundingBox, area, canonicalize, intersection_area, iou, union_area
from .errors import CleanOnnxError, InsufficientBufferError, SizeMismatchError
from .config import (
    COCO_CLASSES,
    DecodingConfig,
    EncodingConfig,
    ModelConfig,
    load_model_config,
    yolo11s_config,
)
from .metadata import load_class_names
from .encoder import TensorEncoder, encode
from .decoder import DetectionDecoder, decode
from .nms import merge_overlapping, pairwise_iou
from .pipeline import DetectionPipeline
from .visualize import draw_detections

__all__ = [
    "BoundingBox",
    "area",
    "canonicalize",
    "intersection_area",
    "iou",
    "union_area",
    "CleanOnnxError",
    "InsufficientBufferError",
    "SizeMismatchError",
    "COCO_CLASSES",
    "DecodingConfig",
    "EncodingConfig",
    "ModelConfig",
    "load_model_config",
    "yolo11s_config",
    "load_class_names",
    "TensorEncoder",
    "encode",
    "DetectionDecoder",
    "decode",
    "merge_overlapping",
    "pairwise_iou",
    "DetectionPipeline",
    "draw_detections",
]
