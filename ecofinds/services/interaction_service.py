# ecofinds/services/interaction_service.py
from sqlmodel import Session

from ecofinds.core.errors import NotFoundError, ValidationError
from ecofinds.models.user import User
from ecofinds.repositories.interaction_repo import InteractionRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.interaction import (
    InteractionRead,
    InteractionUpsert,
    InteractionWithProduct,
    normalize_interaction,
)
from ecofinds.services.shaping import CatalogShaper


def _interaction_kind(value: str) -> str:
    try:
        return normalize_interaction(value)
    except ValueError as exc:
        raise ValidationError(str(exc))


class InteractionService:
    """
    Generic user <-> product edges (favorites, views, wishlist, ...).

    Rows are keyed by (user, product, interaction): recording the same
    interaction twice updates the existing row instead of adding one.
    """

    def __init__(
        self,
        repo: InteractionRepository,
        products: ProductRepository,
        users: UserRepository,
    ):
        self.repo = repo
        self.products = products
        self.shaper = CatalogShaper(products, users)

    def record(
        self,
        session: Session,
        user: User,
        payload: InteractionUpsert,
    ) -> InteractionRead:
        """
        Create-or-update the caller's interaction with a product.

        Re-recording refreshes updated_at and overwrites quantity/notes
        when they are supplied.
        """
        if self.products.get_by_id(session, payload.product_id) is None:
            raise NotFoundError("Product not found")

        row = self.repo.upsert(
            session,
            user_id=user.id,
            product_id=payload.product_id,
            interaction=payload.interaction,
            quantity=payload.quantity,
            notes=payload.notes,
        )
        return InteractionRead.model_validate(row)

    def list_for_user(
        self,
        session: Session,
        user: User,
        interaction: str,
    ) -> list[InteractionWithProduct]:
        """The caller's rows of one kind with a product summary each, newest first."""
        interaction = _interaction_kind(interaction)
        rows = self.repo.list_for_user(session, user.id, interaction)

        products = self.products.get_many(session, [row.product_id for row in rows])
        summaries = {
            s.id: s for s in self.shaper.summaries(session, list(products.values()))
        }
        return [
            InteractionWithProduct(
                **row.model_dump(),
                product=summaries[row.product_id],
            )
            for row in rows
            if row.product_id in summaries
        ]

    def remove(
        self,
        session: Session,
        user: User,
        product_id: int,
        interaction: str,
    ) -> None:
        interaction = _interaction_kind(interaction)
        row = self.repo.get_item(session, user.id, product_id, interaction)
        if row is None:
            raise NotFoundError("Product interaction not found")
        self.repo.delete(session, row)
