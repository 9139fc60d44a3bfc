from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple, Union

from .metadata import load_class_names


PathLike = Union[str, Path]

# Class table shared by the YOLOv8 / YOLO11 COCO exports, in output-row order.
COCO_CLASSES: Tuple[str, ...] = (
    "person", "bicycle", "car", "motorcycle", "airplane", "bus", "train", "truck",
    "boat", "traffic light", "fire hydrant", "stop sign", "parking meter",
    "bench", "bird", "cat", "dog", "horse", "sheep", "cow", "elephant",
    "bear", "zebra", "giraffe", "backpack", "umbrella", "handbag",
    "tie", "suitcase", "frisbee", "skis", "snowboard",
    "sports ball", "kite", "baseball bat", "baseball glove",
    "skateboard", "surfboard", "tennis racket",
    "bottle", "wine glass", "cup", "fork", "knife", "spoon", "bowl",
    "banana", "apple", "sandwich", "orange", "broccoli", "carrot",
    "hot dog", "pizza", "donut", "cake", "chair", "couch", "potted plant",
    "bed", "dining table", "toilet", "tv", "laptop", "mouse",
    "remote", "keyboard", "cell phone", "microwave", "oven", "toaster",
    "sink", "refrigerator", "book", "clock", "vase",
    "scissors", "teddy bear", "hair drier", "toothbrush",
)


@dataclass(frozen=True)
class EncodingConfig:
    """
    Input tensor geometry: (batch_size, channels, target_height, target_width).
    """

    target_height: int
    target_width: int
    channels: int = 3
    batch_size: int = 1

    def __post_init__(self) -> None:
        if self.target_height <= 0 or self.target_width <= 0:
            raise ValueError("target_height and target_width must be > 0")
        if self.channels != 3:
            raise ValueError("channels must be 3 (R, G, B)")
        if self.batch_size != 1:
            raise ValueError("batch_size must be 1")

    @property
    def tensor_shape(self) -> Tuple[int, int, int, int]:
        return self.batch_size, self.channels, self.target_height, self.target_width

    @property
    def tensor_size(self) -> int:
        return self.channels * self.target_height * self.target_width


@dataclass(frozen=True)
class DecodingConfig:
    """
    Output tensor geometry plus filtering parameters.

    - detection_slots: columns of the (4 + C, slots) output matrix, e.g. 8400
    - class_names: ordered label table, one entry per class row
    - model_width/model_height: input resolution the box geometry is expressed in
    - keep_highest_confidence: walk candidates best-first during the merge pass
      instead of the reference ascending order
    """

    detection_slots: int
    class_names: Tuple[str, ...]
    model_width: int
    model_height: int
    confidence_threshold: float = 0.5
    iou_threshold: float = 0.7
    keep_highest_confidence: bool = False

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the config stays hashable.
        object.__setattr__(self, "class_names", tuple(self.class_names))
        if self.detection_slots <= 0:
            raise ValueError("detection_slots must be > 0")
        if not self.class_names:
            raise ValueError("class_names must not be empty")
        if self.model_width <= 0 or self.model_height <= 0:
            raise ValueError("model_width and model_height must be > 0")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be within [0, 1]")

    @property
    def num_classes(self) -> int:
        return len(self.class_names)

    @property
    def row_count(self) -> int:
        return 4 + self.num_classes

    @property
    def required_size(self) -> int:
        return self.detection_slots * self.row_count


@dataclass(frozen=True)
class ModelConfig:
    """
    Encoding and decoding parameters derived from one network description.
    """

    encoding: EncodingConfig
    decoding: DecodingConfig

    def __post_init__(self) -> None:
        if (self.encoding.target_width, self.encoding.target_height) != (
            self.decoding.model_width,
            self.decoding.model_height,
        ):
            raise ValueError("encoding and decoding must agree on the model input size")

    @classmethod
    def build(
        cls,
        *,
        input_height: int,
        input_width: int,
        detection_slots: int,
        class_names: Sequence[str],
        confidence_threshold: float = 0.5,
        iou_threshold: float = 0.7,
        keep_highest_confidence: bool = False,
    ) -> "ModelConfig":
        return cls(
            encoding=EncodingConfig(target_height=input_height, target_width=input_width),
            decoding=DecodingConfig(
                detection_slots=detection_slots,
                class_names=tuple(class_names),
                model_width=input_width,
                model_height=input_height,
                confidence_threshold=confidence_threshold,
                iou_threshold=iou_threshold,
                keep_highest_confidence=keep_highest_confidence,
            ),
        )

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], base_dir: PathLike = ".") -> "ModelConfig":
        allowed = {
            "input_height",
            "input_width",
            "detection_slots",
            "class_names",
            "metadata",
            "confidence_threshold",
            "iou_threshold",
            "keep_highest_confidence",
        }
        unknown = sorted(set(payload.keys()) - allowed)
        if unknown:
            raise ValueError(f"Unknown model config keys: {unknown}")

        if "class_names" in payload and "metadata" in payload:
            raise ValueError("Use either 'class_names' or 'metadata', not both.")
        if "metadata" in payload:
            metadata = Path(str(payload["metadata"]))
            if not metadata.is_absolute():
                metadata = Path(base_dir) / metadata
            class_names = load_class_names(metadata)
        elif "class_names" in payload:
            class_names = payload["class_names"]
            if not isinstance(class_names, list) or not all(isinstance(n, str) for n in class_names):
                raise ValueError("class_names must be a list of strings")
        else:
            class_names = list(COCO_CLASSES)

        keep_highest = payload.get("keep_highest_confidence", False)
        if not isinstance(keep_highest, bool):
            raise ValueError("keep_highest_confidence must be a boolean")

        return cls.build(
            input_height=_require_int(payload, "input_height"),
            input_width=_require_int(payload, "input_width"),
            detection_slots=_require_int(payload, "detection_slots"),
            class_names=class_names,
            confidence_threshold=float(_optional_number(payload, "confidence_threshold", 0.5)),
            iou_threshold=float(_optional_number(payload, "iou_threshold", 0.7)),
            keep_highest_confidence=keep_highest,
        )


def _require_int(payload: Dict[str, Any], key: str) -> int:
    if key not in payload:
        raise ValueError(f"Missing required key: {key}")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def _optional_number(payload: Dict[str, Any], key: str, default: float) -> float:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def load_model_config(path: PathLike) -> ModelConfig:
    """
    Read a JSON network description, e.g.

        {"input_height": 640, "input_width": 640, "detection_slots": 8400,
         "metadata": "metadata.yaml", "confidence_threshold": 0.5}

    A relative `metadata` path resolves against the JSON file's directory.
    Without `class_names` or `metadata` the COCO table is used.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model config not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid model config JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Model config must be a JSON object")
    return ModelConfig.from_dict(payload, base_dir=path.parent)


def yolo11s_config(confidence_threshold: float = 0.5) -> ModelConfig:
    """
    Geometry of the stock YOLO11s COCO export: 640x640 input, 8400 slots, 80 classes.
    """

    return ModelConfig.build(
        input_height=640,
        input_width=640,
        detection_slots=8400,
        class_names=COCO_CLASSES,
        confidence_threshold=confidence_threshold,
    )
