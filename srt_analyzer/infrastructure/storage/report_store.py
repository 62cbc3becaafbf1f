"""
로컬 파일 시스템 리포트 저장소
ScoreReport 1개 = JSON 파일 1개 (REPORTS_DIR/<report_id>.json, camelCase 필드)
"""
import logging
import re
from pathlib import Path
from typing import Optional, Union

from srt_analyzer.schemas.report_dto import ScoreReport

logger = logging.getLogger(__name__)

# report_id 는 uuid hex; 경로 조작 방지용
_REPORT_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class ReportStore:
    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def save(self, report: ScoreReport) -> str:
        path = self._path(report.report_id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(report.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        tmp.replace(path)
        logger.info(f"[STORE] saved report {report.report_id} ({report.processing_status})")
        return report.report_id

    def get(self, report_id: str) -> Optional[ScoreReport]:
        if not _REPORT_ID.match(report_id or ""):
            return None
        path = self._path(report_id)
        if not path.exists():
            return None
        return ScoreReport.model_validate_json(path.read_text(encoding="utf-8"))

    def _path(self, report_id: str) -> Path:
        if not _REPORT_ID.match(report_id):
            raise ValueError(f"invalid report id: {report_id!r}")
        return self.root / f"{report_id}.json"
