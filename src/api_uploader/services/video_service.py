from uuid import UUID
from sqlalchemy.orm import Session

from api_uploader.exceptions.exceptions import ForbiddenError, ResourceNotFoundError
from api_uploader.models import Video
from api_uploader.schema import VideoCreateSchema, VideoUpdate
from api_uploader.services.base_service import BaseService


class VideoService(BaseService[Video, VideoCreateSchema, VideoUpdate]):
    def __init__(self):
        super().__init__(Video)

    def get_owned(self, db: Session, *, video_id: UUID, user_id: UUID) -> Video:
        video = self.get(db, id=video_id)
        if video is None:
            raise ResourceNotFoundError("Couldn't find video")
        if video.user_id != user_id:
            raise ForbiddenError("Not authorized to modify this video")
        return video

    def list_for_user(self, db: Session, *, user_id: UUID) -> list[Video]:
        return (
            self.get_all(db)
            .filter(Video.user_id == user_id)
            .order_by(Video.created_at.desc())
            .all()
        )


video_service = VideoService()
