"""
분석 파이프라인 예외 계층

- DecodeError / InsufficientFramesError 만 파이프라인을 중단시킨다.
- InvalidUploadError 는 분석 전 업로드 검증 실패 (파이프라인과 무관).
- MetricUnavailable 은 내부용: 지표 함수가 필요한 랜드마크를 못 찾았을 때
  기본 점수(0 또는 0.3)로 대체되며 밖으로 전파되지 않는다.
"""


class AnalysisError(Exception):
    """분석 실패 (치명적) 공통 베이스"""


class DecodeError(AnalysisError):
    """비디오를 열 수 없거나 길이를 알 수 없음"""


class InsufficientFramesError(AnalysisError):
    """샘플링 + 포즈 검출 후 사용 가능한 포즈가 부족함"""

    def __init__(self, found: int, required: int):
        self.found = found
        self.required = required
        super().__init__(
            f"Insufficient frames for analysis: {found} usable poses (minimum required: {required})"
        )


class MetricUnavailable(Exception):
    """지표 계산에 필요한 keypoint 누락 (비치명적)"""

    def __init__(self, metric: str, missing: list[str]):
        self.metric = metric
        self.missing = missing
        super().__init__(f"{metric}: missing landmarks {', '.join(missing)}")


class InvalidUploadError(ValueError):
    """업로드 거부 (허용되지 않은 형식 / 크기 초과). API 에서 400 으로 변환"""
