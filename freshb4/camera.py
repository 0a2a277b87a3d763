"""Food photo capture from a USB camera using OpenCV."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path


@dataclass
class CameraCapture:
    camera_index: int
    image_path: str
    captured_at: str  # ISO8601


def _import_cv2():
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python is required: pip install opencv-python"
        ) from None
    return cv2


class FoodCamera:
    """Take a still photo of a food item for freshness analysis."""

    def __init__(self, camera_index: int = 0, save_dir: str = "/tmp/freshb4") -> None:
        self._camera_index = camera_index
        self._save_dir = Path(save_dir)
        self._save_dir.mkdir(parents=True, exist_ok=True)

    def capture(self) -> CameraCapture:
        """Grab one frame and save it as JPEG.

        Raises:
            RuntimeError: If the camera cannot be opened or read.
        """
        cv2 = _import_cv2()

        cap = cv2.VideoCapture(self._camera_index)
        if not cap.isOpened():
            raise RuntimeError(
                f"Could not open camera {self._camera_index}. Check the connection."
            )

        try:
            ret, frame = cap.read()
            if not ret or frame is None:
                raise RuntimeError(
                    f"Could not read a frame from camera {self._camera_index}."
                )

            now = datetime.now(timezone.utc)
            filepath = self._save_dir / f"scan_{now.strftime('%Y%m%d_%H%M%S')}.jpg"
            if not cv2.imwrite(str(filepath), frame):
                raise RuntimeError(f"Could not write image to {filepath}")

            return CameraCapture(
                camera_index=self._camera_index,
                image_path=str(filepath),
                captured_at=now.isoformat(),
            )
        finally:
            cap.release()

    @staticmethod
    def list_cameras(max_check: int = 10) -> list[int]:
        """List available USB camera indices by probing."""
        cv2 = _import_cv2()

        available: list[int] = []
        for i in range(max_check):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                available.append(i)
            cap.release()
        return available
