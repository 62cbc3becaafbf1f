import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from srt_analyzer.common.dependencies import get_analysis_service, get_file_service, get_report_store
from srt_analyzer.common.errors import AnalysisError, InvalidUploadError
from srt_analyzer.infrastructure.storage.report_store import ReportStore
from srt_analyzer.schemas.report_dto import ScoreReport
from srt_analyzer.services.file_service import FileService
from srt_analyzer.services.srt_analysis_service import SrtAnalysisService
from srt_analyzer.utils.concurrency import analysis_slot

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/srt", tags=["SRT Analysis"])


def _report_response(report: ScoreReport) -> dict:
    return {
        "success": True,
        "reportId": report.report_id,
        "data": report.model_dump(mode="json", by_alias=True),
    }


# ========== API Endpoint ==========
@router.post("/analyze")
async def analyze_srt(
        file: UploadFile = File(..., description="SRT 동작 비디오 파일"),
        service: SrtAnalysisService = Depends(get_analysis_service),
        store: ReportStore = Depends(get_report_store),
        files: FileService = Depends(get_file_service),
) -> dict:
    """
    SRT 비디오 분석 API

    - 분석은 threadpool 에서 실행 (이벤트 루프 블로킹 방지)
    - 동시 분석 개수는 analysis_slot 으로 제한
    - 허용되지 않은 형식(mp4/webm/mov 외) 또는 크기 초과는 400
    - 치명적 분석 실패(디코딩 불가, 포즈 부족)는 failed 리포트 저장 후 422
    """
    logger.info(f"📥 SRT 분석 요청: {file.filename}")

    # 1. 파일 검증 + 저장 (형식 / 크기 초과는 400, 부분 파일은 FileService 가 삭제)
    try:
        file_path = await files.save_uploaded_file(file)
        logger.info(f"✅ 파일 저장: {file_path}")
    except InvalidUploadError as e:
        logger.warning(f"⚠️ 업로드 거부: {file.filename} ({e})")
        raise HTTPException(status_code=400, detail=str(e))
    except OSError as e:
        logger.error(f"❌ 파일 저장 실패: {e}")
        raise HTTPException(status_code=500, detail=f"파일 저장 실패: {e}")

    # 2. 분석 실행
    try:
        logger.info("🔄 SRT 분석 시작...")
        async with analysis_slot():
            report = await run_in_threadpool(service.analyze, file_path)

    except AnalysisError as e:
        logger.warning(f"⚠️ 분석 불가: {e}")
        failed = ScoreReport.failed(video_path=file_path)
        store.save(failed)
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "reportId": failed.report_id},
        )

    except Exception as e:
        logger.error(f"❌ 분석 실패: {e}", exc_info=True)
        failed = ScoreReport.failed(video_path=file_path)
        store.save(failed)
        raise HTTPException(
            status_code=500,
            detail={"message": f"분석 실패: {e}", "reportId": failed.report_id},
        )

    finally:
        if files.delete_file(file_path):
            logger.info(f"🗑️ 임시 파일 삭제: {file_path}")

    # 3. 저장
    store.save(report)
    logger.info(f"✅ SRT 분석 완료: {report.report_id} (total={report.total_score})")
    return _report_response(report)


@router.get("/report/{report_id}")
def get_report(
        report_id: str,
        store: ReportStore = Depends(get_report_store),
) -> dict:
    report = store.get(report_id)
    if report is None:
        raise HTTPException(status_code=404, detail=f"Report not found: {report_id}")
    return _report_response(report)


ROUTERS = [router]
