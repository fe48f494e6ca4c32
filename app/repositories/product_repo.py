# app/repositories/product_repo.py
import uuid

from sqlmodel import Session, col, or_, select

from app.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    - create/update commit; stage() does not, for callers that own the
      transaction (order placement / cancellation).
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

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
    ) -> list[Product]:
        stmt = select(Product)
        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        if brand_id is not None:
            stmt = stmt.where(Product.brand_id == brand_id)
        if featured is not None:
            stmt = stmt.where(Product.is_featured == featured)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    col(Product.name).ilike(pattern),
                    col(Product.description).ilike(pattern),
                )
            )
        stmt = stmt.order_by(Product.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_low_stock(self, session: Session, threshold: int) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.is_active == True)  # noqa: E712
            .where(Product.stock_quantity <= threshold)
            .order_by(Product.stock_quantity)
        )
        return list(session.exec(stmt).all())

    def list_featured(self, session: Session, limit: int = 8) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.is_active == True, Product.is_featured == True)  # noqa: E712
            .order_by(Product.created_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_top_selling(self, session: Session, limit: int = 10) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.is_active == True)  # noqa: E712
            .order_by(Product.sold_count.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def stage(self, session: Session, product: Product) -> Product:
        session.add(product)
        return product
