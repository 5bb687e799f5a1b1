# ecofinds/repositories/interaction_repo.py
import logging

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ecofinds.models.interaction import UserProduct
from ecofinds.models.product import Product
from ecofinds.models.user import User, utcnow

logger = logging.getLogger(__name__)


class InteractionRepository:
    """
    Data access layer for UserProduct rows (cart, favorites, views, ...).
    """

    # ----- Reads -----

    def list_for_user(
        self,
        session: Session,
        user_id: int,
        interaction: str,
    ) -> list[UserProduct]:
        """Rows of one kind for a user, most recently added first."""
        stmt = (
            select(UserProduct)
            .where(UserProduct.user_id == user_id, UserProduct.interaction == interaction)
            .order_by(UserProduct.created_at.desc(), UserProduct.id.desc())
        )
        return list(session.exec(stmt).all())

    def list_for_viewer(
        self,
        session: Session,
        user_id: int,
        product_id: int,
    ) -> list[UserProduct]:
        stmt = (
            select(UserProduct)
            .where(UserProduct.user_id == user_id, UserProduct.product_id == product_id)
            .order_by(UserProduct.id)
        )
        return list(session.exec(stmt).all())

    def get_item(
        self,
        session: Session,
        user_id: int,
        product_id: int,
        interaction: str,
    ) -> UserProduct | None:
        stmt = select(UserProduct).where(
            UserProduct.user_id == user_id,
            UserProduct.product_id == product_id,
            UserProduct.interaction == interaction,
        )
        return session.exec(stmt).first()

    def get_owned(
        self,
        session: Session,
        item_id: int,
        user_id: int,
        interaction: str,
    ) -> UserProduct | None:
        """
        Row by id, but only if it belongs to user_id and has the given kind.
        A foreign id reads exactly like a missing one.
        """
        stmt = select(UserProduct).where(
            UserProduct.id == item_id,
            UserProduct.user_id == user_id,
            UserProduct.interaction == interaction,
        )
        return session.exec(stmt).first()

    def counts_for_products(
        self,
        session: Session,
        product_ids: list[int],
        kinds: tuple[str, ...],
    ) -> dict[int, int]:
        if not product_ids:
            return {}
        stmt = (
            select(UserProduct.product_id, func.count(UserProduct.id))
            .where(
                UserProduct.product_id.in_(product_ids),
                UserProduct.interaction.in_(kinds),
            )
            .group_by(UserProduct.product_id)
        )
        return {pid: int(n) for pid, n in session.exec(stmt).all()}

    def recent_viewers(
        self,
        session: Session,
        product_id: int,
        limit: int = 5,
    ) -> list[tuple[UserProduct, User]]:
        """Latest VIEWED rows for a product joined to the viewing user."""
        stmt = (
            select(UserProduct, User)
            .join(User, User.id == UserProduct.user_id)
            .where(
                UserProduct.product_id == product_id,
                UserProduct.interaction == "VIEWED",
            )
            .order_by(UserProduct.updated_at.desc(), UserProduct.id.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def counts_for_seller(
        self,
        session: Session,
        seller_id: int,
        kinds: tuple[str, ...],
    ) -> list[tuple[str, int]]:
        """Interaction rows on all of a seller's products, grouped by kind."""
        stmt = (
            select(UserProduct.interaction, func.count(UserProduct.id))
            .join(Product, Product.id == UserProduct.product_id)
            .where(Product.seller_id == seller_id, UserProduct.interaction.in_(kinds))
            .group_by(UserProduct.interaction)
        )
        return list(session.exec(stmt).all())

    # ----- Writes -----

    def update(self, session: Session, item: UserProduct) -> UserProduct:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: UserProduct) -> None:
        session.delete(item)
        session.commit()

    def clear_for_user(self, session: Session, user_id: int, interaction: str) -> None:
        session.exec(
            delete(UserProduct).where(
                UserProduct.user_id == user_id,
                UserProduct.interaction == interaction,
            )
        )
        session.commit()

    def upsert(
        self,
        session: Session,
        *,
        user_id: int,
        product_id: int,
        interaction: str,
        quantity: int | None = None,
        notes: str | None = None,
    ) -> UserProduct:
        """
        Create-or-update keyed by (user_id, product_id, interaction).

        On update, quantity/notes are overwritten only when given and
        updated_at is always refreshed. When a concurrent request inserts
        the same key first, the unique constraint rejects this insert and
        the row that won is updated instead.
        """
        existing = self.get_item(session, user_id, product_id, interaction)

        if existing is None:
            row = UserProduct(
                user_id=user_id,
                product_id=product_id,
                interaction=interaction,
                quantity=quantity,
                notes=notes,
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.info(
                    "Concurrent insert on (%s, %s, %s); updating existing row",
                    user_id,
                    product_id,
                    interaction,
                )
                existing = self.get_item(session, user_id, product_id, interaction)
                if existing is None:
                    raise
            else:
                session.refresh(row)
                return row

        if quantity is not None:
            existing.quantity = quantity
        if notes is not None:
            existing.notes = notes
        existing.updated_at = utcnow()
        return self.update(session, existing)
