# app/services/product_service.py
import logging
import re
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.errors import NotFoundError
from app.core.storage_utils import (
    delete_public_url,
    generate_filename,
    upload_to_storage,
)
from app.models.product import Product
from app.repositories.catalog_repo import BrandRepository, CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import ProductCreate, ProductRead, ProductUpdate

logger = logging.getLogger(__name__)

# Columns a PATCH may clear with an explicit null; null leaves the others unchanged.
CLEARABLE_FIELDS = {"description", "discount_price", "category_id", "brand_id", "image_url"}

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class ProductService:
    """
    Business logic for Product.

    Responsibilities:
      - slug generation & uniqueness
      - category / brand reference checks
      - soft delete (deactivate / activate)
      - image upload orchestration with Supabase Storage
    Stock is only edited directly by admins here; order placement and
    cancellation adjust it through OrderService.
    """

    def __init__(
        self,
        repo: ProductRepository,
        category_repo: CategoryRepository,
        brand_repo: BrandRepository,
    ):
        self.repo = repo
        self.category_repo = category_repo
        self.brand_repo = brand_repo

    # ----- Helpers -----

    @staticmethod
    def _slugify(raw: str) -> str:
        """
        Basic slugification:
          - lowercase
          - non-alphanumeric -> '-'
          - collapse multiple '-'
          - strip leading/trailing '-'
        """
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "product"

    def _ensure_unique_slug(self, session: Session, base_slug: str) -> str:
        """
        Ensure slug is unique by appending -2, -3, ... if needed.
        """
        slug = base_slug
        i = 2
        while self.repo.get_by_slug(session, slug) is not None:
            slug = f"{base_slug}-{i}"
            i += 1
        return slug

    def _check_references(
        self,
        session: Session,
        category_id: uuid.UUID | None,
        brand_id: uuid.UUID | None,
    ) -> None:
        if category_id is not None and self.category_repo.get_by_id(session, category_id) is None:
            raise NotFoundError("Category")
        if brand_id is not None and self.brand_repo.get_by_id(session, brand_id) is None:
            raise NotFoundError("Brand")

    @staticmethod
    def to_read(product: Product) -> ProductRead:
        return ProductRead(
            id=product.id,
            name=product.name,
            slug=product.slug,
            description=product.description,
            price=product.price,
            discount_price=product.discount_price,
            effective_price=product.effective_price,
            stock_quantity=product.stock_quantity,
            sold_count=product.sold_count,
            image_url=product.image_url,
            category_id=product.category_id,
            brand_id=product.brand_id,
            is_active=product.is_active,
            is_featured=product.is_featured,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

    # ----- Products -----

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        category_id: uuid.UUID | None = None,
        brand_id: uuid.UUID | None = None,
        featured: bool | None = None,
        search: str | None = None,
    ) -> list[ProductRead]:
        products = self.repo.list_products(
            session,
            skip=skip,
            limit=limit,
            only_active=only_active,
            category_id=category_id,
            brand_id=brand_id,
            featured=featured,
            search=search,
        )
        return [self.to_read(p) for p in products]

    def get_product_model(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product")
        return product

    def get_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        include_inactive: bool = False,
    ) -> ProductRead:
        """
        Deactivated products are only visible with include_inactive (admins).
        """
        product = self.get_product_model(session, product_id)
        if not product.is_active and not include_inactive:
            raise NotFoundError("Product")
        return self.to_read(product)

    def list_low_stock(self, session: Session, threshold: int) -> list[ProductRead]:
        return [self.to_read(p) for p in self.repo.list_low_stock(session, threshold)]

    def list_featured(self, session: Session, limit: int = 8) -> list[ProductRead]:
        return [self.to_read(p) for p in self.repo.list_featured(session, limit)]

    def list_top_selling(self, session: Session, limit: int = 10) -> list[ProductRead]:
        """Active best sellers by sold_count."""
        return [self.to_read(p) for p in self.repo.list_top_selling(session, limit)]

    def create_product(
        self,
        session: Session,
        payload: ProductCreate,
    ) -> ProductRead:
        """
        Create a new product with a unique slug.
        """
        self._check_references(session, payload.category_id, payload.brand_id)

        base_slug = self._slugify(payload.slug or payload.name)
        product = Product(
            name=payload.name,
            slug=self._ensure_unique_slug(session, base_slug),
            description=payload.description,
            price=payload.price,
            discount_price=payload.discount_price,
            stock_quantity=payload.stock_quantity,
            category_id=payload.category_id,
            brand_id=payload.brand_id,
            is_active=payload.is_active,
            is_featured=payload.is_featured,
        )
        product = self.repo.create(session, product)
        logger.info("Product %s created (%s)", product.id, product.slug)
        return self.to_read(product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> ProductRead:
        """
        Partial update of a product.

        - If slug is changed, enforce uniqueness.
        - Price changes never touch existing order items.
        """
        product = self.get_product_model(session, product_id)
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field in CLEARABLE_FIELDS
        }

        self._check_references(
            session, changes.get("category_id"), changes.get("brand_id")
        )

        new_slug = changes.pop("slug", None)
        if new_slug is not None:
            new_base_slug = self._slugify(new_slug)
            if new_base_slug != product.slug:
                product.slug = self._ensure_unique_slug(session, new_base_slug)

        for field, value in changes.items():
            setattr(product, field, value)

        return self.to_read(self.repo.update(session, product))

    def set_active(
        self,
        session: Session,
        product_id: uuid.UUID,
        is_active: bool,
    ) -> ProductRead:
        """
        Soft delete / restore. Products are never removed so that
        historical order items keep their reference.
        """
        product = self.get_product_model(session, product_id)
        product.is_active = is_active
        product = self.repo.update(session, product)
        logger.info("Product %s is_active=%s", product.id, is_active)
        return self.to_read(product)

    # ----- Image -----

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 5MB).",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    def set_image(
        self,
        session: Session,
        product_id: uuid.UUID,
        content_type: str,
        file_bytes: bytes,
    ) -> ProductRead:
        """
        Upload or replace the main image for a product.

        Path pattern:
            products/<product_id>/<uuid>.<ext>
        """
        product = self.get_product_model(session, product_id)
        ext = self._validate_and_get_ext(content_type, file_bytes)

        previous_url = product.image_url
        path = f"products/{product.id}/{generate_filename(ext)}"
        product.image_url = upload_to_storage(path, file_bytes, content_type)
        product = self.repo.update(session, product)

        if previous_url:
            delete_public_url(previous_url)

        return self.to_read(product)
