"""
포즈 추출 Domain Logic
MediaPipe Pose 사용 (외부 모델: 포즈 추정 자체는 구현하지 않고 출력 계약만 소비)

- PoseSource: 프레임 이미지 1장 → 포즈 0~1개
- PoseModelHandle: 프로세스당 최대 1번만 생성되는 모델 핸들 (thread-safe 초기화)
- MediaPipePoseSource: 핸들을 주입받아 프레임 파일을 디코딩/추정
"""
import logging
import threading
from typing import Any, Callable, Optional, Protocol

import cv2

from srt_analyzer.schemas.pose_dto import Keypoint, Landmark, PoseData

logger = logging.getLogger(__name__)

# MediaPipe Pose landmark indices
MEDIAPIPE_INDEX: dict[Landmark, int] = {
    Landmark.nose: 0,
    Landmark.left_shoulder: 11,
    Landmark.right_shoulder: 12,
    Landmark.left_elbow: 13,
    Landmark.right_elbow: 14,
    Landmark.left_wrist: 15,
    Landmark.right_wrist: 16,
    Landmark.left_hip: 23,
    Landmark.right_hip: 24,
    Landmark.left_knee: 25,
    Landmark.right_knee: 26,
    Landmark.left_ankle: 27,
    Landmark.right_ankle: 28,
}


class PoseSource(Protocol):
    """포즈 추정 모델 계약"""

    def estimate(self, frame_path: str, frame_index: int = 0) -> Optional[PoseData]: ...


def build_mediapipe_pose(model_complexity: int = 1, min_detection_confidence: float = 0.3):
    """MediaPipe Pose 인스턴스 생성 (프레임끼리 독립이므로 static_image_mode=True)"""
    import mediapipe as mp

    return mp.solutions.pose.Pose(
        static_image_mode=True,
        model_complexity=model_complexity,
        enable_segmentation=False,
        min_detection_confidence=min_detection_confidence,
    )


class PoseModelHandle:
    """
    지연 생성 + 1회 초기화 보장 모델 핸들.

    - get(): 처음 호출한 스레드만 factory 를 실행 (동시 호출 시 중복 생성 없음)
    - process(): 모델 추론은 핸들 락으로 직렬화 (MediaPipe 그래프는 스레드 안전하지 않음)
    - close() / with 문: 진행 중인 추론을 기다린 뒤 자원 해제
    """

    def __init__(self, factory: Callable[[], Any]):
        self._factory = factory
        self._model: Optional[Any] = None
        self._init_lock = threading.Lock()
        self._infer_lock = threading.Lock()
        self._closed = False

    @property
    def initialized(self) -> bool:
        return self._model is not None

    def get(self) -> Any:
        model = self._model
        if model is not None:
            return model
        with self._init_lock:
            if self._closed:
                raise RuntimeError("Pose model handle is closed")
            if self._model is None:
                logger.info("[POSE] initializing pose model")
                self._model = self._factory()
            return self._model

    def process(self, rgb_image) -> Any:
        model = self.get()
        with self._infer_lock:
            if self._closed:
                raise RuntimeError("Pose model handle is closed")
            return model.process(rgb_image)

    def close(self) -> None:
        # 진행 중인 추론이 끝난 뒤 해제
        with self._init_lock, self._infer_lock:
            if self._closed:
                return
            if self._model is not None and hasattr(self._model, "close"):
                self._model.close()
            self._model = None
            self._closed = True
            logger.info("[POSE] pose model released")

    def __enter__(self) -> "PoseModelHandle":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class MediaPipePoseSource:
    """MediaPipe 기반 PoseSource 구현"""

    def __init__(self, handle: PoseModelHandle):
        self.handle = handle

    def estimate(self, frame_path: str, frame_index: int = 0) -> Optional[PoseData]:
        """
        프레임 이미지 → PoseData (검출 실패/이미지 읽기 실패 시 None)

        좌표는 MediaPipe 정규화 좌표(0~1)를 픽셀로 환산하고,
        visibility 를 keypoint 신뢰도로 사용한다.
        """
        image = cv2.imread(frame_path)
        if image is None:
            logger.warning(f"[POSE] cannot read frame: {frame_path}")
            return None

        # OpenCV는 BGR → MediaPipe는 RGB
        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        results = self.handle.process(rgb)

        if not results.pose_landmarks:
            return None

        height, width = image.shape[:2]
        return landmarks_to_pose(results.pose_landmarks.landmark, width, height, frame_index)


def landmarks_to_pose(landmarks, width: int, height: int, frame_index: int) -> PoseData:
    """MediaPipe Landmark 리스트 → PoseData (픽셀 좌표)"""
    keypoints = []
    for name, idx in MEDIAPIPE_INDEX.items():
        if idx >= len(landmarks):
            continue
        lm = landmarks[idx]
        keypoints.append(
            Keypoint(
                landmark=name,
                x=float(lm.x) * width,
                y=float(lm.y) * height,
                confidence=min(1.0, max(0.0, float(lm.visibility))),
            )
        )
    return PoseData(frame_index=frame_index, width=width, height=height, keypoints=tuple(keypoints))
