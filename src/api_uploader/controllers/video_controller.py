import logging
from uuid import UUID, uuid4

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool

from api_uploader.config.base_config import BaseConfig, get_settings
from api_uploader.core.auth import get_current_user_id
from api_uploader.database import get_db
from api_uploader.exceptions.exceptions import BadRequestError
from api_uploader.schema import ApiResponse, VideoCreateRequest, VideoCreateSchema, VideoSchema
from api_uploader.services.upload_service import UploadService
from api_uploader.services.video_service import video_service
from api_uploader.utils.file_validator import (
    check_content_length,
    limit_request_body,
    normalize_media_type,
    thumbnail_policy,
    validate_upload,
    video_policy,
)


logger = logging.getLogger(__name__)

router = APIRouter()


def get_upload_service(config: BaseConfig = Depends(get_settings)) -> UploadService:
    return UploadService(config)


def parse_video_id(video_id: str) -> UUID:
    try:
        return UUID(video_id)
    except ValueError:
        raise BadRequestError("Invalid video ID")


@router.post("/videos", response_model=ApiResponse[VideoSchema], status_code=status.HTTP_201_CREATED)
async def create_video(
    payload: VideoCreateRequest,
    user_id: UUID = Depends(get_current_user_id),
    db=Depends(get_db),
):
    video = video_service.create(
        db,
        obj_in=VideoCreateSchema(
            id=uuid4(),
            user_id=user_id,
            title=payload.title,
            description=payload.description,
        ),
    )
    return ApiResponse(
        success=True,
        message="Video created successfully",
        data=VideoSchema.model_validate(video)
    )


@router.get("/videos", response_model=ApiResponse[list[VideoSchema]])
async def list_videos(user_id: UUID = Depends(get_current_user_id), db=Depends(get_db)):
    videos = video_service.list_for_user(db, user_id=user_id)
    return ApiResponse(
        success=True,
        message="Videos retrieved successfully",
        data=[VideoSchema.model_validate(v) for v in videos]
    )


@router.get("/videos/{video_id}", response_model=ApiResponse[VideoSchema])
async def get_video(video_id: str, user_id: UUID = Depends(get_current_user_id), db=Depends(get_db)):
    video = video_service.get_owned(db, video_id=parse_video_id(video_id), user_id=user_id)
    return ApiResponse(
        success=True,
        message="Video retrieved successfully",
        data=VideoSchema.model_validate(video)
    )


@router.put("/videos/{video_id}/upload", response_model=ApiResponse[VideoSchema])
async def upload_video(
    video_id: str,
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
    db=Depends(get_db),
    config: BaseConfig = Depends(get_settings),
    upload_service: UploadService = Depends(get_upload_service),
):
    video_uuid = parse_video_id(video_id)
    logger.info(f"uploading video {video_uuid} by user {user_id}")

    # Ownership and the declared size are settled before the request body is read
    video = video_service.get_owned(db, video_id=video_uuid, user_id=user_id)
    policy = video_policy(config)
    check_content_length(request.headers, policy)

    async with limit_request_body(request, policy).form(max_files=1) as form:
        upload = validate_upload(form, policy)
        media_type = normalize_media_type(upload.content_type)
        updated = await run_in_threadpool(
            upload_service.upload_video, db, video, media_type, upload.file
        )

    return ApiResponse(
        success=True,
        message="Video uploaded successfully",
        data=VideoSchema.model_validate(updated)
    )


@router.put("/videos/{video_id}/thumbnail", response_model=ApiResponse[VideoSchema])
async def upload_thumbnail(
    video_id: str,
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
    db=Depends(get_db),
    config: BaseConfig = Depends(get_settings),
    upload_service: UploadService = Depends(get_upload_service),
):
    video_uuid = parse_video_id(video_id)
    logger.info(f"uploading thumbnail for video {video_uuid} by user {user_id}")

    video = video_service.get_owned(db, video_id=video_uuid, user_id=user_id)
    policy = thumbnail_policy(config)
    check_content_length(request.headers, policy)

    async with limit_request_body(request, policy).form(max_files=1) as form:
        upload = validate_upload(form, policy)
        media_type = normalize_media_type(upload.content_type)
        updated = await run_in_threadpool(
            upload_service.upload_thumbnail, db, video, media_type, upload.file
        )

    return ApiResponse(
        success=True,
        message="Thumbnail uploaded successfully",
        data=VideoSchema.model_validate(updated)
    )
