# app/services/catalog_service.py
import uuid

from sqlmodel import Session, SQLModel

from app.core.errors import ConflictError, NotFoundError
from app.models.catalog import Brand, Category
from app.repositories.catalog_repo import BrandRepository, CategoryRepository
from app.schemas.catalog import BrandCreate, BrandUpdate, CategoryCreate, CategoryUpdate

# Columns a PATCH may clear with an explicit null; null leaves the others unchanged.
CATEGORY_CLEARABLE = {"description", "image_url"}
BRAND_CLEARABLE = {"description", "country", "logo_url"}


def _changes(payload: SQLModel, clearable: set[str]) -> dict:
    return {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in clearable
    }


class CatalogService:
    """
    Categories and brands.

    Both are soft-deleted (is_active=False) so products and historical
    orders keep valid references. Names are unique.
    """

    def __init__(self, category_repo: CategoryRepository, brand_repo: BrandRepository):
        self.category_repo = category_repo
        self.brand_repo = brand_repo

    # ----- Categories -----

    def list_categories(self, session: Session, only_active: bool = True) -> list[Category]:
        return self.category_repo.list(session, only_active=only_active)

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.category_repo.get_by_id(session, category_id)
        if not category:
            raise NotFoundError("Category")
        return category

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        if self.category_repo.get_by_name(session, payload.name) is not None:
            raise ConflictError(f"Category already exists: {payload.name}")
        return self.category_repo.save(session, Category(**payload.model_dump()))

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> Category:
        category = self.get_category(session, category_id)
        changes = _changes(payload, CATEGORY_CLEARABLE)

        name = changes.get("name")
        if name is not None and name != category.name:
            if self.category_repo.get_by_name(session, name) is not None:
                raise ConflictError(f"Category already exists: {name}")

        for field, value in changes.items():
            setattr(category, field, value)
        return self.category_repo.save(session, category)

    def set_category_active(
        self,
        session: Session,
        category_id: uuid.UUID,
        is_active: bool,
    ) -> Category:
        category = self.get_category(session, category_id)
        category.is_active = is_active
        return self.category_repo.save(session, category)

    # ----- Brands -----

    def list_brands(self, session: Session, only_active: bool = True) -> list[Brand]:
        return self.brand_repo.list(session, only_active=only_active)

    def get_brand(self, session: Session, brand_id: uuid.UUID) -> Brand:
        brand = self.brand_repo.get_by_id(session, brand_id)
        if not brand:
            raise NotFoundError("Brand")
        return brand

    def create_brand(self, session: Session, payload: BrandCreate) -> Brand:
        if self.brand_repo.get_by_name(session, payload.name) is not None:
            raise ConflictError(f"Brand already exists: {payload.name}")
        return self.brand_repo.save(session, Brand(**payload.model_dump()))

    def update_brand(
        self,
        session: Session,
        brand_id: uuid.UUID,
        payload: BrandUpdate,
    ) -> Brand:
        brand = self.get_brand(session, brand_id)
        changes = _changes(payload, BRAND_CLEARABLE)

        name = changes.get("name")
        if name is not None and name != brand.name:
            if self.brand_repo.get_by_name(session, name) is not None:
                raise ConflictError(f"Brand already exists: {name}")

        for field, value in changes.items():
            setattr(brand, field, value)
        return self.brand_repo.save(session, brand)

    def set_brand_active(
        self,
        session: Session,
        brand_id: uuid.UUID,
        is_active: bool,
    ) -> Brand:
        brand = self.get_brand(session, brand_id)
        brand.is_active = is_active
        return self.brand_repo.save(session, brand)
