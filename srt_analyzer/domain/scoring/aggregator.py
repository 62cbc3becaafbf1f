"""
점수 집계 Domain Logic
페이즈 지표 평균 + 지지 감점 → 앉기/일어서기/총점 + 복합 지표

순수 함수: 같은 입력이면 항상 같은 결과.
"""
import math

from srt_analyzer.config.analysis_config import AnalysisConfig, DEFAULT_ANALYSIS_CONFIG
from srt_analyzer.domain.angle.geometry import clamp, safe_mean
from srt_analyzer.schemas.metric_dto import MetricScore, RisingFrameMetrics, SittingFrameMetrics
from srt_analyzer.schemas.phase_dto import SupportSummary
from srt_analyzer.schemas.report_dto import (
    AggregatedScores,
    ComponentScores,
    RiskLevel,
    RisingPhaseScores,
    SittingPhaseScores,
)


class ScoreAggregator:
    """SRT 점수 집계기"""

    def __init__(self, config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG):
        self.config = config

    def aggregate(
        self,
        sitting: list[SittingFrameMetrics],
        rising: list[RisingFrameMetrics],
        supports: SupportSummary,
    ) -> AggregatedScores:
        sitting_scores = self.sitting_averages(sitting)
        rising_scores = self.rising_averages(rising)

        sit_score = self.phase_score(self.raw_sit_score(sitting_scores), supports.sitting_penalty)
        rise_score = self.phase_score(self.raw_rise_score(rising_scores), supports.rising_penalty)
        total_score = self.total_score(sit_score, rise_score)

        return AggregatedScores(
            sit_score=sit_score,
            rise_score=rise_score,
            total_score=total_score,
            sitting_phase=sitting_scores,
            rising_phase=rising_scores,
            components=self.component_scores(sitting, rising),
            risk_level=self.risk_level(total_score),
        )

    # ---------- 페이즈 평균 ----------
    def sitting_averages(self, frames: list[SittingFrameMetrics]) -> SittingPhaseScores:
        return SittingPhaseScores(
            knee_flexion=self.metric_average([f.knee_flexion for f in frames]),
            hip_control=self.metric_average([f.hip_control for f in frames]),
            spinal_alignment=self.metric_average([f.spinal_alignment for f in frames]),
        )

    def rising_averages(self, frames: list[RisingFrameMetrics]) -> RisingPhaseScores:
        return RisingPhaseScores(
            knee_extension=self.metric_average([f.knee_extension for f in frames]),
            hip_drive=self.metric_average([f.hip_drive for f in frames]),
            stability=self.metric_average([f.stability for f in frames]),
        )

    def metric_average(self, scores: list[MetricScore]) -> float:
        """
        프레임별 점수 평균 (랜드마크 부족으로 대체된 기본 점수 0 / 0.3 포함).
        유한하지 않은 값만 제외하고, 남은 표본이 min_valid_samples 미만이면 기본값(0.3).
        """
        return safe_mean(
            (s.score for s in scores),
            min_count=self.config.min_valid_samples,
            default=self.config.default_metric_score,
        )

    # ---------- 페이즈 점수 ----------
    def raw_sit_score(self, s: SittingPhaseScores) -> float:
        w = self.config.sit_weights
        raw = (
            s.knee_flexion * w.knee_flexion
            + s.hip_control * w.hip_control
            + s.spinal_alignment * w.spinal_alignment
        ) * self.config.max_phase_score
        return max(self.config.min_phase_score, raw)

    def raw_rise_score(self, r: RisingPhaseScores) -> float:
        w = self.config.rise_weights
        raw = (
            r.knee_extension * w.knee_extension
            + r.hip_drive * w.hip_drive
            + r.stability * w.stability
        ) * self.config.max_phase_score
        return max(self.config.min_phase_score, raw)

    def phase_score(self, raw: float, penalty: float) -> float:
        """감점 적용 후 [1.5, 5] 클램프, 소수 2자리"""
        cfg = self.config
        if not math.isfinite(raw):
            raw = cfg.min_phase_score
        score = clamp(raw - penalty * cfg.penalty_factor, cfg.min_phase_score, cfg.max_phase_score)
        return round(score, 2)

    def total_score(self, sit_score: float, rise_score: float) -> float:
        cfg = self.config
        return round(clamp(sit_score + rise_score, cfg.min_total_score, cfg.max_total_score), 2)

    # ---------- 복합 지표 ----------
    def component_scores(
        self,
        sitting: list[SittingFrameMetrics],
        rising: list[RisingFrameMetrics],
    ) -> ComponentScores:
        """
        프레임별 점수에 배수를 곱해 두 페이즈를 합친 뒤 평균 → [0, 1] 클램프.
        """
        m = self.config.composite

        postural = self._pooled(
            ([f.spinal_alignment for f in sitting], m.postural_spinal_alignment),
            ([f.stability for f in rising], m.postural_stability),
        )
        balance = self._pooled(
            ([f.hip_control for f in sitting], m.balance_hip_control),
            ([f.stability for f in rising], m.balance_stability),
        )
        coordination = self._pooled(
            ([f.knee_flexion for f in sitting], m.coordination_knee_flexion),
            ([f.knee_extension for f in rising], m.coordination_knee_extension),
            ([f.hip_drive for f in rising], m.coordination_hip_drive),
        )
        return ComponentScores(
            postural_control=postural,
            balance=balance,
            coordination=coordination,
        )

    def _pooled(self, *groups: tuple[list[MetricScore], float]) -> float:
        values = []
        for scores, multiplier in groups:
            values.extend(s.score * multiplier for s in scores)
        avg = safe_mean(
            values,
            min_count=self.config.min_valid_samples,
            default=self.config.default_metric_score,
        )
        return clamp(avg, 0.0, 1.0)

    # ---------- 위험도 ----------
    def risk_level(self, total_score: float) -> RiskLevel:
        if total_score >= self.config.low_risk_total:
            return "low"
        if total_score >= self.config.moderate_risk_total:
            return "moderate"
        return "high"
