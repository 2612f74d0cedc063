"""
Pytest configuration and shared fixtures for the video upload API.

Configuration is pushed into the environment before any application module is
imported, since the settings object and the database engine are built at import
time. The suite runs against a sqlite file in a temp directory, a fake process
runner standing in for ffmpeg/ffprobe, and a mocked MinIO client.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Generator, Optional, Sequence
from unittest.mock import Mock
from uuid import UUID, uuid4

import pytest

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="video-upload-api-tests-"))

os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT / 'test.db'}"
os.environ["ASSETS_ROOT"] = str(_TEST_ROOT / "assets")
os.environ["MINIO_ENDPOINT"] = "http://localhost:9000"
os.environ["MINIO_ACCESS_KEY"] = "test-access-key"
os.environ["MINIO_SECRET_KEY"] = "test-secret-key"
os.environ["MINIO_BUCKET"] = "test-videos"
os.environ["JWT_SECRET"] = "test-secret-key-for-jwt-signing"
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ.pop("CDN_DISTRIBUTION", None)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from api_uploader.config.base_config import BaseConfig, get_settings  # noqa: E402
from api_uploader.controllers.video_controller import get_upload_service  # noqa: E402
from api_uploader.core.auth import create_access_token  # noqa: E402
from api_uploader.database import Base, SessionLocal, engine  # noqa: E402
from api_uploader.main import app  # noqa: E402
from api_uploader.models import Video  # noqa: E402
from api_uploader.services.process_runner import ProcessResult, ProcessRunner  # noqa: E402
from api_uploader.services.upload_service import UploadService  # noqa: E402
from api_uploader.storage.local_storage import LocalAssetStorage  # noqa: E402
from api_uploader.storage.minio_client import MinioClient  # noqa: E402


CDN_HOST = "cdn.example.com"


# ==============================================================================
# Fake external tools
# ==============================================================================

class FakeRunner(ProcessRunner):
    """
    Stands in for ffmpeg and ffprobe.

    ffmpeg copies its input to the output path unless `ffmpeg_result` is set;
    ffprobe reports `width` x `height` unless `ffprobe_result` is set. Every
    invocation is recorded in `calls`, along with whether the command's input
    file existed at that moment.
    """

    def __init__(self, width: int = 1920, height: int = 1080):
        self.width = width
        self.height = height
        self.ffmpeg_result: Optional[ProcessResult] = None
        self.ffprobe_result: Optional[ProcessResult] = None
        self.write_partial_output = False
        self.calls: list[list[str]] = []
        self.existing_files: list[set[str]] = []

    def run(self, args: Sequence[str]) -> ProcessResult:
        args = [str(a) for a in args]
        self.calls.append(args)
        # Staged files all live beside the command's last argument
        self.existing_files.append({p.name for p in Path(args[-1]).parent.glob("*")})

        if args[0] == "ffmpeg":
            output_path = Path(args[-1])
            if self.ffmpeg_result is not None:
                if self.write_partial_output:
                    output_path.write_bytes(b"partial")
                return self.ffmpeg_result
            input_path = Path(args[args.index("-i") + 1])
            output_path.write_bytes(input_path.read_bytes())
            return ProcessResult(exit_code=0, stdout="", stderr="")

        if args[0] == "ffprobe":
            if self.ffprobe_result is not None:
                return self.ffprobe_result
            output = json.dumps({"streams": [{"width": self.width, "height": self.height}]})
            return ProcessResult(exit_code=0, stdout=output, stderr="")

        return ProcessResult(exit_code=127, stdout="", stderr=f"unknown tool {args[0]}")

    @property
    def tools_called(self) -> list[str]:
        return [call[0] for call in self.calls]


# ==============================================================================
# Settings Fixtures
# ==============================================================================

@pytest.fixture
def assets_root(tmp_path: Path) -> Path:
    root = tmp_path / "assets"
    root.mkdir()
    return root


@pytest.fixture
def test_settings(assets_root: Path) -> BaseConfig:
    """Settings pointing the assets root at a per-test directory."""
    return get_settings().model_copy(update={"ASSETS_ROOT": str(assets_root)})


# ==============================================================================
# Database Fixtures
# ==============================================================================

@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def other_user_id() -> UUID:
    return uuid4()


@pytest.fixture
def video(db_session: Session, user_id: UUID) -> Video:
    record = Video(id=uuid4(), user_id=user_id, title="Boots and cats", description="demo")
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


@pytest.fixture
def reload_video():
    """Read a record back through a fresh session."""
    def _reload(video_id: UUID) -> Video:
        session = SessionLocal()
        try:
            return session.get(Video, video_id)
        finally:
            session.close()
    return _reload


# ==============================================================================
# Service Fixtures
# ==============================================================================

@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def mock_storage() -> Mock:
    """MinIO client double that records whether the file was present when uploaded."""
    mock = Mock(spec=MinioClient)
    mock.uploaded_files_existed = []

    def upload_file(file_path: str, object_name: str, content_type: str):
        mock.uploaded_files_existed.append(Path(file_path).exists())
        return Mock(object_name=object_name)

    mock.upload_file.side_effect = upload_file
    mock.public_url.side_effect = lambda object_name: f"https://{CDN_HOST}/{object_name}"
    mock.cdn_host = CDN_HOST
    return mock


@pytest.fixture
def upload_service(
    test_settings: BaseConfig, fake_runner: FakeRunner, mock_storage: Mock
) -> UploadService:
    return UploadService(
        test_settings,
        runner=fake_runner,
        storage=mock_storage,
        local_storage=LocalAssetStorage(test_settings.ASSETS_ROOT),
    )


# ==============================================================================
# HTTP Fixtures
# ==============================================================================

@pytest.fixture
def client(
    db_session: Session, test_settings: BaseConfig, upload_service: UploadService
) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user_id: UUID, test_settings: BaseConfig) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, test_settings)}"}


@pytest.fixture
def other_auth_headers(other_user_id: UUID, test_settings: BaseConfig) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_user_id, test_settings)}"}
