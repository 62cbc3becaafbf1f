import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from srt_analyzer.api import include_all_routers
from srt_analyzer.config.settings import settings
from srt_analyzer.infrastructure.storage.report_store import ReportStore
from srt_analyzer.services.file_service import FileService
from srt_analyzer.services.service_factory import create_pose_model_handle, create_srt_analysis_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 포즈 모델 핸들은 프로세스당 1개: 시작 시 생성, 종료 시 해제
    handle = create_pose_model_handle()
    app.state.pose_handle = handle
    app.state.analysis_service = create_srt_analysis_service(pose_handle=handle)
    app.state.report_store = ReportStore(settings.REPORTS_DIR)
    app.state.file_service = FileService()
    logger.info("🚀 SRT analyzer started")
    try:
        yield
    finally:
        handle.close()
        logger.info("🛑 SRT analyzer stopped")


# 앱 생성
app = FastAPI(debug=settings.DEBUG_MODE, lifespan=lifespan)

# srt_analyzer/api 라우터 등록 (health, srt)
include_all_routers(app)

app.openapi = lambda: get_openapi(
    title="SRT Analysis API",
    version=settings.APP_VERSION,
    description="Sit-to-Rise Test 비디오 분석 API",
    routes=app.routes,
)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("srt_analyzer.main:app", host="0.0.0.0", port=settings.FASTAPI_PORT, reload=True)
