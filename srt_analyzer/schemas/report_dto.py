"""
분석 결과 리포트 DTO
파이프라인 최종 산출물. 생성 후 변경 불가(frozen).
JSON 필드명(camelCase)은 외부 레이어가 의존하는 안정 인터페이스다.
"""
import uuid
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from srt_analyzer.schemas.phase_dto import SupportType

ProcessingStatus = Literal["completed", "failed"]
RiskLevel = Literal["low", "moderate", "high"]


class _ReportModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class SittingPhaseScores(_ReportModel):
    """앉기 페이즈 지표 평균 (0~1)"""
    knee_flexion: float = Field(0.0, ge=0.0, le=1.0)
    hip_control: float = Field(0.0, ge=0.0, le=1.0)
    spinal_alignment: float = Field(0.0, ge=0.0, le=1.0)


class RisingPhaseScores(_ReportModel):
    """일어서기 페이즈 지표 평균 (0~1)"""
    knee_extension: float = Field(0.0, ge=0.0, le=1.0)
    hip_drive: float = Field(0.0, ge=0.0, le=1.0)
    stability: float = Field(0.0, ge=0.0, le=1.0)


class ComponentScores(_ReportModel):
    """복합 지표 (0~1)"""
    postural_control: float = Field(0.0, ge=0.0, le=1.0)
    balance: float = Field(0.0, ge=0.0, le=1.0)
    coordination: float = Field(0.0, ge=0.0, le=1.0)


class AggregatedScores(_ReportModel):
    """ScoreAggregator 결과 묶음"""
    sit_score: float
    rise_score: float
    total_score: float
    sitting_phase: SittingPhaseScores
    rising_phase: RisingPhaseScores
    components: ComponentScores
    risk_level: RiskLevel


class Feedback(_ReportModel):
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class PerformanceStats(_ReportModel):
    frame_count: int = 0
    pose_count: int = 0
    total_time_ms: float = 0.0
    average_frame_time_ms: float = 0.0
    transition_frame: Optional[int] = None


class ScoreReport(_ReportModel):
    """SRT 분석 리포트 (분석 1회당 1개 생성)"""
    report_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    processing_status: ProcessingStatus = "completed"
    video_path: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # 주요 점수
    sit_score: float = Field(0.0, ge=0.0, le=5.0)
    rise_score: float = Field(0.0, ge=0.0, le=5.0)
    total_score: float = Field(0.0, ge=0.0, le=10.0)

    # 복합 지표
    postural_control: float = Field(0.0, ge=0.0, le=1.0)
    balance: float = Field(0.0, ge=0.0, le=1.0)
    coordination: float = Field(0.0, ge=0.0, le=1.0)

    # 페이즈별 지표 평균
    sitting_phase: SittingPhaseScores = Field(default_factory=SittingPhaseScores)
    rising_phase: RisingPhaseScores = Field(default_factory=RisingPhaseScores)

    feedback: Feedback = Field(default_factory=Feedback)
    support_points_used: list[list[SupportType]] = Field(default_factory=list)
    risk_level: Optional[RiskLevel] = None
    key_frames: list[str] = Field(default_factory=list)
    performance: PerformanceStats = Field(default_factory=PerformanceStats)

    @classmethod
    def failed(cls, video_path: Optional[str] = None) -> "ScoreReport":
        """치명적 오류 시 저장되는 실패 리포트 (모든 점수 0)"""
        return cls(processing_status="failed", video_path=video_path)

    @property
    def is_failed(self) -> bool:
        return self.processing_status == "failed"
