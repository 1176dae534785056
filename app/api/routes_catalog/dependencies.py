"""Common dependencies for catalog routes."""
from typing import Annotated, TypeAlias

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.catalog import CatalogService, build_catalog_service

DbDep: TypeAlias = Annotated[Session, Depends(get_db)]


def get_catalog_service(db: DbDep) -> CatalogService:
    """Get a CatalogService bound to the request's session."""
    return build_catalog_service(db)


CatalogServiceDep: TypeAlias = Annotated[CatalogService, Depends(get_catalog_service)]
