"""
FastAPI 의존성
lifespan 에서 app.state 에 올려둔 공유 객체를 라우터로 전달한다.
테스트에서는 app.dependency_overrides 로 교체.
"""
import logging

from fastapi import HTTPException, Request

from srt_analyzer.infrastructure.storage.report_store import ReportStore
from srt_analyzer.services.file_service import FileService
from srt_analyzer.services.srt_analysis_service import SrtAnalysisService

logger = logging.getLogger(__name__)


def _state(request: Request, name: str):
    obj = getattr(request.app.state, name, None)
    if obj is None:
        logger.error(f"❌ app.state.{name} 가 초기화되지 않았습니다")
        raise HTTPException(status_code=503, detail=f"Service not ready: {name}")
    return obj


def get_analysis_service(request: Request) -> SrtAnalysisService:
    return _state(request, "analysis_service")


def get_report_store(request: Request) -> ReportStore:
    return _state(request, "report_store")


def get_file_service(request: Request) -> FileService:
    return _state(request, "file_service")
