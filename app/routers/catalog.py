# app/routers/catalog.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.catalog_repo import BrandRepository, CategoryRepository
from app.schemas.catalog import (
    BrandCreate,
    BrandRead,
    BrandUpdate,
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
)
from app.services.catalog_service import CatalogService

categories_router = APIRouter(prefix="/categories", tags=["Categories"])
brands_router = APIRouter(prefix="/brands", tags=["Brands"])

service = CatalogService(CategoryRepository(), BrandRepository())


# -------- Categories --------


@categories_router.get("", response_model=list[CategoryRead])
def list_categories(
    include_inactive: bool = False,
    session: Session = Depends(get_session),
):
    return service.list_categories(session, only_active=not include_inactive)


@categories_router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.get_category(session, category_id)


@categories_router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_category(payload: CategoryCreate, session: Session = Depends(get_session)):
    return service.create_category(session, payload)


@categories_router.patch(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
):
    return service.update_category(session, category_id, payload)


@categories_router.delete(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def deactivate_category(category_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.set_category_active(session, category_id, False)


@categories_router.post(
    "/{category_id}/activate",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def activate_category(category_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.set_category_active(session, category_id, True)


# -------- Brands --------


@brands_router.get("", response_model=list[BrandRead])
def list_brands(
    include_inactive: bool = False,
    session: Session = Depends(get_session),
):
    return service.list_brands(session, only_active=not include_inactive)


@brands_router.get("/{brand_id}", response_model=BrandRead)
def get_brand(brand_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.get_brand(session, brand_id)


@brands_router.post(
    "",
    response_model=BrandRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_brand(payload: BrandCreate, session: Session = Depends(get_session)):
    return service.create_brand(session, payload)


@brands_router.patch(
    "/{brand_id}",
    response_model=BrandRead,
    dependencies=[Depends(require_admin)],
)
def update_brand(
    brand_id: uuid.UUID,
    payload: BrandUpdate,
    session: Session = Depends(get_session),
):
    return service.update_brand(session, brand_id, payload)


@brands_router.delete(
    "/{brand_id}",
    response_model=BrandRead,
    dependencies=[Depends(require_admin)],
)
def deactivate_brand(brand_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.set_brand_active(session, brand_id, False)


@brands_router.post(
    "/{brand_id}/activate",
    response_model=BrandRead,
    dependencies=[Depends(require_admin)],
)
def activate_brand(brand_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.set_brand_active(session, brand_id, True)
