# app/repositories/catalog_repo.py
from __future__ import annotations

import uuid

from sqlmodel import Session, select

from app.models.catalog import Brand, Category


class CategoryRepository:
    """
    Data access layer for Category. No business logic.
    """

    def get_by_id(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def get_by_name(self, session: Session, name: str) -> Category | None:
        stmt = select(Category).where(Category.name == name)
        return session.exec(stmt).first()

    def list(self, session: Session, only_active: bool = True) -> list[Category]:
        stmt = select(Category)
        if only_active:
            stmt = stmt.where(Category.is_active == True)  # noqa: E712
        return list(session.exec(stmt.order_by(Category.name)).all())

    def save(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category


class BrandRepository:
    """
    Data access layer for Brand. No business logic.
    """

    def get_by_id(self, session: Session, brand_id: uuid.UUID) -> Brand | None:
        return session.get(Brand, brand_id)

    def get_by_name(self, session: Session, name: str) -> Brand | None:
        stmt = select(Brand).where(Brand.name == name)
        return session.exec(stmt).first()

    def list(self, session: Session, only_active: bool = True) -> list[Brand]:
        stmt = select(Brand)
        if only_active:
            stmt = stmt.where(Brand.is_active == True)  # noqa: E712
        return list(session.exec(stmt.order_by(Brand.name)).all())

    def save(self, session: Session, brand: Brand) -> Brand:
        session.add(brand)
        session.commit()
        session.refresh(brand)
        return brand
