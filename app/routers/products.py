# app/routers/products.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    UploadFile,
    status,
)
from sqlmodel import Session

from app.core.auth import get_current_user, require_admin
from app.core.config import get_settings
from app.database import get_session
from app.models.user import User
from app.repositories.catalog_repo import BrandRepository, CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

service = ProductService(ProductRepository(), CategoryRepository(), BrandRepository())


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    category_id: uuid.UUID | None = None,
    brand_id: uuid.UUID | None = None,
    featured: bool | None = None,
    search: str | None = None,
):
    """
    List active products.

    Optional filters: category_id, brand_id, featured, search (name/description).
    """
    return service.list_products(
        session,
        skip=skip,
        limit=limit,
        category_id=category_id,
        brand_id=brand_id,
        featured=featured,
        search=search,
    )


@router.get("/featured", response_model=list[ProductRead])
def list_featured_products(
    limit: int = 8,
    session: Session = Depends(get_session),
):
    return service.list_featured(session, limit)


@router.get("/top-selling", response_model=list[ProductRead])
def list_top_selling_products(
    limit: int = 10,
    session: Session = Depends(get_session),
):
    return service.list_top_selling(session, limit)


# -------- Admin endpoints --------


@router.get(
    "/low-stock",
    response_model=list[ProductRead],
    dependencies=[Depends(require_admin)],
)
def list_low_stock_products(
    threshold: int | None = None,
    session: Session = Depends(get_session),
):
    """
    Active products with stock at or below `threshold` (default LOW_STOCK_THRESHOLD).
    """
    if threshold is None:
        threshold = get_settings().LOW_STOCK_THRESHOLD
    return service.list_low_stock(session, threshold)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Get a single product by id (public).

    Deactivated products are 404 except for admins.
    """
    include_inactive = current_user is not None and current_user.is_admin
    return service.get_product(session, product_id, include_inactive=include_inactive)


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    return service.create_product(session, payload)


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    return service.update_product(session, product_id, payload)


@router.delete(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def deactivate_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Soft delete: the product is hidden, never removed.
    """
    return service.set_active(session, product_id, False)


@router.post(
    "/{product_id}/activate",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def activate_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.set_active(session, product_id, True)


@router.post(
    "/{product_id}/image",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
    summary="Upload or replace the product image",
)
def upload_product_image(
    product_id: uuid.UUID,
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
):
    """
    Accepts JPEG, PNG, WEBP up to 5MB.
    """
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    return service.set_image(
        session=session,
        product_id=product_id,
        content_type=file.content_type,
        file_bytes=file.file.read(),
    )
