"""
페이즈 분할 / 지지(support) 감지 DTO
PhaseSegmenter, SupportDetector 입출력용
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from srt_analyzer.schemas.pose_dto import PoseData


class PhaseSegmentation(BaseModel):
    """앉기/일어서기 포즈 구간 (전환점 부근은 겹칠 수 있음)"""
    model_config = ConfigDict(frozen=True)

    transition_index: int = Field(..., ge=0)
    sitting: list[PoseData]
    rising: list[PoseData]


class SupportType(str, Enum):
    HAND = "HAND"
    KNEE = "KNEE"


def ordered_supports(types) -> list[SupportType]:
    """SupportType 집합을 enum 선언 순서(HAND → KNEE)로 정렬"""
    return [t for t in SupportType if t in types]


class SupportSummary(BaseModel):
    """프레임별 지지 감지 결과 + 페이즈별 합집합/감점"""
    model_config = ConfigDict(frozen=True)

    per_frame: list[list[SupportType]] = Field(default_factory=list)
    sitting: list[SupportType] = Field(default_factory=list)
    rising: list[SupportType] = Field(default_factory=list)
    sitting_penalty: float = 0.0
    rising_penalty: float = 0.0

    @property
    def used(self) -> list[SupportType]:
        """두 페이즈 합집합 (피드백 문구용, 감점과 같은 계산 경로)"""
        return ordered_supports(set(self.sitting) | set(self.rising))
