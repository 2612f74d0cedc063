from .database import Base
from sqlalchemy import Column, String, UUID, DateTime, func, Text


class Video(Base):
    __tablename__ = "videos"

    id = Column(UUID, primary_key=True, index=True)
    user_id = Column(UUID, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    # Set only by the upload pipeline once the asset is stored
    thumbnail_url = Column(Text, nullable=True)
    video_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
