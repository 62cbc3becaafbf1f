"""
비디오 프레임 추출 관련 DTO
FrameSampler ↔ 비디오 디코딩 유틸 입출력용
"""
from pydantic import BaseModel, Field


class FrameFilters(BaseModel):
    """프레임 추출 시 적용할 필터"""
    scale_factor: int = Field(default=2, ge=1, description="해상도 축소 배수 (iw/N)")
    normalize: bool = Field(default=True, description="밝기/대비 정규화")
    denoise: float = Field(default=1.5, ge=0.0, description="노이즈 제거 강도 (0이면 생략)")
    jpeg_quality: int = Field(default=3, ge=1, le=31, description="-q:v (낮을수록 고화질)")


class FrameExtractionRequest(BaseModel):
    """프레임 추출 요청"""
    file_path: str
    output_dir: str
    target_fps: float = Field(..., gt=0, description="추출 FPS")
    filters: FrameFilters = Field(default_factory=FrameFilters)


class SampledFrames(BaseModel):
    """샘플링 결과 (프레임 파일 경로 + 메타데이터)"""
    frames: list[str] = Field(default_factory=list, description="순서가 보장된 프레임 이미지 경로")
    duration: float = Field(..., description="원본 길이(초)")
    fps: float = Field(..., description="실제 사용한 추출 FPS")
    extracted_count: int = Field(..., ge=0, description="다운샘플링 전 추출 프레임 수")
