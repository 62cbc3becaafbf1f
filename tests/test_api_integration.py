"""
API Integration Tests

FastAPI 엔드포인트 통합 테스트
"""
import io

import pytest
from fastapi import status


def _upload():
    return {"file": ("srt.mp4", io.BytesIO(b"fake video"), "video/mp4")}


class TestHealthEndpoints:
    """Health Check 엔드포인트 테스트"""

    def test_basic_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "ok"
        assert isinstance(data["ffmpeg"], bool)


class TestRouting:
    """라우터 등록"""

    def test_each_route_registered_once(self, app):
        paths = [route.path for route in app.routes if hasattr(route, "methods")]

        for path in ("/health", "/srt/analyze", "/srt/report/{report_id}"):
            assert paths.count(path) == 1


class TestSrtEndpoints:
    """SRT 분석 / 리포트 조회"""

    def test_analyze_and_fetch_report(self, client, tmp_path):
        response = client.post("/srt/analyze", files=_upload())

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        report_id = body["reportId"]
        assert body["data"]["reportId"] == report_id
        assert body["data"]["processingStatus"] == "completed"
        assert 2.0 <= body["data"]["totalScore"] <= 10.0
        assert "strengths" in body["data"]["feedback"]

        # 업로드 파일은 분석 후 삭제
        assert list((tmp_path / "uploads").iterdir()) == []

        fetched = client.get(f"/srt/report/{report_id}")
        assert fetched.status_code == status.HTTP_200_OK
        assert fetched.json()["data"]["totalScore"] == body["data"]["totalScore"]

    def test_insufficient_frames_returns_422(self, client, mock_pose_source, tmp_path):
        mock_pose_source.estimate.side_effect = lambda path, index=0: None

        response = client.post("/srt/analyze", files=_upload())

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert "Insufficient frames" in detail["message"]

        failed = client.get(f"/srt/report/{detail['reportId']}")
        assert failed.status_code == status.HTTP_200_OK
        assert failed.json()["data"]["processingStatus"] == "failed"
        assert failed.json()["data"]["totalScore"] == 0.0
        assert list((tmp_path / "uploads").iterdir()) == []

    def test_unexpected_error_returns_500(self, client, mock_pose_source):
        mock_pose_source.estimate.side_effect = RuntimeError("model crashed")

        response = client.post("/srt/analyze", files=_upload())

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        report_id = response.json()["detail"]["reportId"]
        assert client.get(f"/srt/report/{report_id}").json()["data"]["processingStatus"] == "failed"

    def test_unknown_report_returns_404(self, client):
        response = client.get("/srt/report/doesnotexist")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_missing_file_returns_422(self, client):
        response = client.post("/srt/analyze")
        assert response.status_code == 422


class TestUploadValidation:
    """업로드 형식 / 크기 검증"""

    def test_unsupported_content_type_returns_400(self, client, mock_frame_sampler, tmp_path):
        files = {"file": ("notes.txt", io.BytesIO(b"not a video"), "text/plain")}

        response = client.post("/srt/analyze", files=files)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Invalid video format. Supported formats: MP4, WebM, MOV"
        assert list((tmp_path / "uploads").iterdir()) == []
        mock_frame_sampler.sample.assert_not_called()

    @pytest.mark.parametrize(
        "filename, content_type",
        [("srt.webm", "video/webm"), ("srt.mov", "video/quicktime")],
    )
    def test_other_video_types_are_accepted(self, client, filename, content_type):
        files = {"file": (filename, io.BytesIO(b"fake video"), content_type)}

        response = client.post("/srt/analyze", files=files)

        assert response.status_code == status.HTTP_200_OK

    def test_oversized_upload_returns_400(self, app, client, mock_frame_sampler, tmp_path):
        """상한을 넘는 순간 저장 중단 + 부분 파일 삭제"""
        from srt_analyzer.common.dependencies import get_file_service
        from srt_analyzer.services.file_service import FileService

        small = FileService(upload_dir=tmp_path / "uploads", max_bytes=1024 * 1024, chunk_size=256 * 1024)
        app.dependency_overrides[get_file_service] = lambda: small
        files = {"file": ("big.mp4", io.BytesIO(b"\0" * (1024 * 1024 + 1)), "video/mp4")}

        response = client.post("/srt/analyze", files=files)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "File size exceeds 1MB limit"
        assert list((tmp_path / "uploads").iterdir()) == []
        mock_frame_sampler.sample.assert_not_called()

    def test_upload_at_limit_is_accepted(self, app, client, tmp_path):
        from srt_analyzer.common.dependencies import get_file_service
        from srt_analyzer.services.file_service import FileService

        exact = FileService(upload_dir=tmp_path / "uploads", max_bytes=1024, chunk_size=100)
        app.dependency_overrides[get_file_service] = lambda: exact
        files = {"file": ("srt.mp4", io.BytesIO(b"\0" * 1024), "video/mp4")}

        response = client.post("/srt/analyze", files=files)

        assert response.status_code == status.HTTP_200_OK
