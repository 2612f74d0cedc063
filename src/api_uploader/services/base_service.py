import logging
from typing import Generic, Type, TypeVar
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api_uploader.database import Base
from api_uploader.exceptions.exceptions import PersistenceError, ResourceNotFoundError


logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseService(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        Generic service with default methods to Create and Update.

        **Parameters**

        * `model`: A SQLAlchemy model class
        """
        self.model = model

    def _commit(self, db: Session, db_obj: ModelType) -> ModelType:
        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to persist {self.model.__name__}: {e}")
            raise PersistenceError(f"Couldn't persist {self.model.__name__}: {e}") from e
        return db_obj

    def create(self, db: Session, *, obj_in: CreateSchemaType) -> ModelType:
        obj_in_data = obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        return self._commit(db, db_obj)

    def update(
        self, db: Session, *, db_obj: ModelType, obj_in: UpdateSchemaType
    ) -> ModelType:
        update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)

        return self._commit(db, db_obj)

    def apply_update(self, db: Session, *, id, obj_in: UpdateSchemaType) -> ModelType:
        """Load the row by id, apply the field-level patch and return the stored result."""
        db_obj = self.get(db, id=id)
        if db_obj is None:
            raise ResourceNotFoundError(f"{self.model.__name__} {id} not found")
        return self.update(db, db_obj=db_obj, obj_in=obj_in)

    def get_all(
        self, db: Session
    ):
        return db.query(self.model)

    def get(
        self, db: Session, id
    ) -> ModelType | None:
        return db.get(self.model, id)
