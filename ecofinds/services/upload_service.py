# ecofinds/services/upload_service.py
import logging
from typing import Iterable

from sqlmodel import Session

from ecofinds.core.config import get_settings
from ecofinds.core.errors import ForbiddenError, NotFoundError, PayloadTooLargeError, ValidationError
from ecofinds.core.storage_utils import (
    delete_public_url,
    generate_filename,
    upload_to_storage,
)
from ecofinds.models.product import Product, ProductImage
from ecofinds.models.user import User, UserImage
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.upload import UploadedImage, UploadedImages

logger = logging.getLogger(__name__)

settings = get_settings()

# --- Image config ---

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class UploadService:
    """
    Image upload/delete orchestration with object storage.

    Responsibilities:
      - validate content type + size before anything is stored
      - product images: owner only, at most one primary per product
      - profile image: one per user, replaced in place
    """

    def __init__(self, products: ProductRepository, users: UserRepository):
        self.products = products
        self.users = users

    # ----- Helpers -----

    @staticmethod
    def _validate_and_get_ext(content_type: str | None, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise ValidationError("Unsupported image type. Allowed: JPEG, PNG, WEBP, GIF.")

        if not file_bytes:
            raise ValidationError("No image file provided")

        if len(file_bytes) > settings.MAX_IMAGE_BYTES:
            raise PayloadTooLargeError(
                f"Image too large (max {settings.MAX_IMAGE_BYTES // (1024 * 1024)}MB)."
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    def _get_owned_product(self, session: Session, user: User, product_id: int) -> Product:
        product = self.products.get_by_id(session, product_id)
        if product is None:
            raise NotFoundError("Product not found")
        if product.seller_id != user.id:
            raise ForbiddenError("Not authorized to modify this product")
        return product

    @staticmethod
    def _upload_product_file(product_id: int, ext: str, content_type: str, file_bytes: bytes) -> str:
        """
        Path pattern:
            products/<product_id>/<uuid>.<ext>
        """
        path = f"products/{product_id}/{generate_filename(ext)}"
        return upload_to_storage(path, file_bytes, content_type)

    @staticmethod
    def _read(image: ProductImage | UserImage) -> UploadedImage:
        return UploadedImage(id=image.id, image_url=image.url, is_primary=image.is_primary)

    # ----- Product images -----

    def upload_product_image(
        self,
        session: Session,
        user: User,
        product_id: int,
        content_type: str | None,
        file_bytes: bytes,
        is_primary: bool = True,
    ) -> UploadedImage:
        """
        Store one image for a product.

        When is_primary, every other image of the product loses the flag.
        """
        product = self._get_owned_product(session, user, product_id)
        ext = self._validate_and_get_ext(content_type, file_bytes)

        url = self._upload_product_file(product.id, ext, content_type, file_bytes)
        image = ProductImage(product_id=product.id, url=url, is_primary=is_primary)
        [image] = self.products.create_images(
            session,
            [image],
            clear_primary_for=product.id if is_primary else None,
        )
        return self._read(image)

    def upload_product_images(
        self,
        session: Session,
        user: User,
        product_id: int,
        files: Iterable[tuple[str | None, bytes]],
    ) -> UploadedImages:
        """
        Store several images for a product in one request.

        Args:
            files: iterable of (content_type, file_bytes)

        The first image becomes the primary one. Every file is validated
        before the first upload so a bad file stores nothing.
        """
        product = self._get_owned_product(session, user, product_id)
        files = list(files)
        if not files:
            raise ValidationError("No image files provided")
        if len(files) > settings.MAX_IMAGES_PER_UPLOAD:
            raise ValidationError(
                f"Too many images (max {settings.MAX_IMAGES_PER_UPLOAD} per upload)."
            )

        exts = [self._validate_and_get_ext(ct, data) for ct, data in files]

        images = [
            ProductImage(
                product_id=product.id,
                url=self._upload_product_file(product.id, ext, ct, data),
                is_primary=idx == 0,
            )
            for idx, (ext, (ct, data)) in enumerate(zip(exts, files))
        ]
        images = self.products.create_images(session, images, clear_primary_for=product.id)
        return UploadedImages(images=[self._read(img) for img in images])

    def delete_product_image(self, session: Session, user: User, image_id: int) -> None:
        """Remove the row and (best-effort) the stored file."""
        image = self.products.get_image_by_id(session, image_id)
        if image is None:
            raise NotFoundError("Image not found")
        self._get_owned_product(session, user, image.product_id)

        delete_public_url(image.url)
        self.products.delete_image(session, image)

    # ----- Profile image -----

    def upload_profile_image(
        self,
        session: Session,
        user: User,
        content_type: str | None,
        file_bytes: bytes,
    ) -> UploadedImage:
        """
        Upload or replace the caller's profile image.

        Path pattern:
            users/<user_id>/<uuid>.<ext>
        """
        ext = self._validate_and_get_ext(content_type, file_bytes)
        path = f"users/{user.id}/{generate_filename(ext)}"
        url = upload_to_storage(path, file_bytes, content_type)

        image = self.users.get_image(session, user.id)
        if image is None:
            image = UserImage(user_id=user.id, url=url, is_primary=True)
        else:
            # Best-effort cleanup of the previous file
            delete_public_url(image.url)
            image.url = url

        image = self.users.save_image(session, image)
        logger.info("Profile image updated for user %s", user.id)
        return self._read(image)
