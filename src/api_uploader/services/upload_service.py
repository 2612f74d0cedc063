import logging
from typing import BinaryIO, Optional, Union

from sqlalchemy.orm import Session

from api_uploader.config.base_config import BaseConfig
from api_uploader.models import Video
from api_uploader.schema import VideoUpdate
from api_uploader.services.probe_service import VideoProber
from api_uploader.services.process_runner import ProcessRunner, SubprocessRunner
from api_uploader.services.transcoding_service import FastStartTranscoder
from api_uploader.services.video_service import video_service
from api_uploader.storage.local_storage import LocalAssetStorage
from api_uploader.storage.minio_client import MinioClient
from api_uploader.storage.path_generator import generate_asset_name, generate_video_object_key


logger = logging.getLogger(__name__)


class UploadService:
    """
    Turns a validated upload into a stored asset and records its URL.

    Video: stage locally -> fast-start remux -> aspect ratio probe -> object
    storage under `<aspect>/<name>` -> `video_url` update. Every local file is
    removed by the step that owns it, on success and on failure, so at most the
    staged original and its remuxed copy exist at the same time.

    Thumbnail: written once under the assets root, which is served at `/assets`,
    then `thumbnail_url` is updated.
    """

    def __init__(
        self,
        config: BaseConfig,
        runner: Optional[ProcessRunner] = None,
        storage: Optional[MinioClient] = None,
        local_storage: Optional[LocalAssetStorage] = None,
    ):
        self.config = config
        runner = runner or SubprocessRunner(timeout=config.TOOL_TIMEOUT_SECONDS)
        self.transcoder = FastStartTranscoder(runner, ffmpeg_binary=config.FFMPEG_BINARY)
        self.prober = VideoProber(runner, ffprobe_binary=config.FFPROBE_BINARY)
        self._storage = storage
        self.local_storage = local_storage or LocalAssetStorage(config.ASSETS_ROOT)

    @property
    def storage(self) -> MinioClient:
        if self._storage is None:
            self._storage = MinioClient(self.config)
        return self._storage

    def upload_video(
        self, db: Session, video: Video, media_type: str, content: Union[bytes, BinaryIO]
    ) -> Video:
        asset_name = generate_asset_name(media_type)

        staged_path = self.local_storage.write(asset_name, content)
        with self.local_storage.staged(staged_path):
            processed_path = self.transcoder.process_for_fast_start(staged_path)

        with self.local_storage.staged(processed_path):
            aspect_ratio = self.prober.get_aspect_ratio(processed_path)
            object_key = generate_video_object_key(aspect_ratio, asset_name)
            logger.info(f"Uploading video {video.id} to storage at {object_key}")
            self.storage.upload_file(str(processed_path), object_key, content_type=media_type)

        updated = video_service.apply_update(
            db, id=video.id, obj_in=VideoUpdate(video_url=self.storage.public_url(object_key))
        )
        logger.info(f"Video uploaded for video {updated.title}")
        return updated

    def upload_thumbnail(
        self, db: Session, video: Video, media_type: str, content: Union[bytes, BinaryIO]
    ) -> Video:
        asset_name = generate_asset_name(media_type)
        asset_path = self.local_storage.write(asset_name, content)

        thumbnail_url = f"{self.config.public_base_url}/assets/{asset_name}"
        try:
            updated = video_service.apply_update(
                db, id=video.id, obj_in=VideoUpdate(thumbnail_url=thumbnail_url)
            )
        except Exception:
            self.local_storage.delete(asset_path)
            raise

        logger.info(f"Thumbnail uploaded for video {updated.title}")
        return updated
