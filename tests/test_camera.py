"""Tests for the food camera module (mocked OpenCV)."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from freshb4.camera import CameraCapture, FoodCamera


@pytest.fixture
def mock_cv2():
    """Inject a mock cv2 module into sys.modules."""
    mock = MagicMock()
    with patch.dict(sys.modules, {"cv2": mock}):
        yield mock


def _capture_device(opened=True, frame=None, ok=True):
    cap = MagicMock()
    cap.isOpened.return_value = opened
    cap.read.return_value = (ok, frame)
    return cap


class TestFoodCamera:
    def test_init_creates_save_dir(self, tmp_path):
        save_dir = tmp_path / "sub" / "dir"
        FoodCamera(save_dir=str(save_dir))
        assert save_dir.exists()

    def test_capture_success(self, mock_cv2, tmp_path):
        cap = _capture_device(frame=MagicMock())
        mock_cv2.VideoCapture.return_value = cap
        mock_cv2.imwrite.return_value = True

        result = FoodCamera(camera_index=1, save_dir=str(tmp_path)).capture()

        assert isinstance(result, CameraCapture)
        assert result.camera_index == 1
        assert Path(result.image_path).parent == tmp_path
        assert Path(result.image_path).name.startswith("scan_")
        assert result.image_path.endswith(".jpg")
        assert result.captured_at
        mock_cv2.VideoCapture.assert_called_once_with(1)
        cap.release.assert_called_once()

    def test_capture_camera_not_found(self, mock_cv2, tmp_path):
        mock_cv2.VideoCapture.return_value = _capture_device(opened=False)
        with pytest.raises(RuntimeError, match="Could not open camera 0"):
            FoodCamera(save_dir=str(tmp_path)).capture()

    def test_capture_read_failure(self, mock_cv2, tmp_path):
        cap = _capture_device(ok=False)
        mock_cv2.VideoCapture.return_value = cap
        with pytest.raises(RuntimeError, match="Could not read a frame"):
            FoodCamera(save_dir=str(tmp_path)).capture()
        cap.release.assert_called_once()

    def test_capture_write_failure(self, mock_cv2, tmp_path):
        mock_cv2.VideoCapture.return_value = _capture_device(frame=MagicMock())
        mock_cv2.imwrite.return_value = False
        with pytest.raises(RuntimeError, match="Could not write image"):
            FoodCamera(save_dir=str(tmp_path)).capture()

    def test_list_cameras(self, mock_cv2):
        mock_cv2.VideoCapture.side_effect = lambda i: _capture_device(opened=i in (0, 2))
        assert FoodCamera.list_cameras(max_check=4) == [0, 2]

    def test_missing_opencv(self, tmp_path):
        with patch.dict(sys.modules, {"cv2": None}):
            with pytest.raises(ImportError, match="opencv-python is required"):
                FoodCamera(save_dir=str(tmp_path)).capture()
