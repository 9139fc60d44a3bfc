from __future__ import annotations


class CleanOnnxError(Exception):
    """
    Base class for errors raised by the encode/decode core.
    """


class SizeMismatchError(CleanOnnxError, ValueError):
    """
    Destination tensor is too small for the configured input shape.
    """

    def __init__(self, actual: int, required: int):
        self.actual = int(actual)
        self.required = int(required)
        super().__init__(
            f"destination tensor only holds {self.actual} floats, needs {self.required} "
            "(make sure it's the right shape!)"
        )


class InsufficientBufferError(CleanOnnxError, ValueError):
    """
    Model output is shorter than detection_slots * (4 + num_classes).
    """

    def __init__(self, actual: int, required: int, detection_slots: int, num_classes: int):
        self.actual = int(actual)
        self.required = int(required)
        super().__init__(
            f"output tensor holds {self.actual} floats, needs {self.required} "
            f"for {detection_slots} detections with {num_classes} classes"
        )
