# ecofinds/routers/upload.py
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlmodel import Session

from ecofinds.core.auth import require_auth
from ecofinds.database import get_session
from ecofinds.models.user import User
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.common import ApiResponse
from ecofinds.schemas.upload import UploadedImage, UploadedImages
from ecofinds.services.upload_service import UploadService

router = APIRouter(prefix="/upload", tags=["Upload"])

service = UploadService(ProductRepository(), UserRepository())


@router.post(
    "/product-image",
    response_model=ApiResponse[UploadedImage],
    summary="Upload one image for a product",
)
def upload_product_image(
    product_id: int = Form(..., alias="productId"),
    is_primary: bool = Form(True, alias="isPrimary"),
    image: UploadFile = File(...),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Upload an image for one of the caller's products.

    - Accepts JPEG, PNG, WEBP, GIF up to 5MB.
    - A primary upload takes the primary flag from older images.
    """
    data = service.upload_product_image(
        session,
        current_user,
        product_id,
        content_type=image.content_type,
        file_bytes=image.file.read(),
        is_primary=is_primary,
    )
    return ApiResponse(message="Image uploaded successfully", data=data)


@router.post(
    "/product-images",
    response_model=ApiResponse[UploadedImages],
    summary="Upload several images for a product",
)
def upload_product_images(
    product_id: int = Form(..., alias="productId"),
    images: list[UploadFile] = File(...),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Upload up to 5 images at once; the first one becomes primary.
    """
    files = [(f.content_type, f.file.read()) for f in images]
    data = service.upload_product_images(session, current_user, product_id, files)
    return ApiResponse(message="Images uploaded successfully", data=data)


@router.delete("/product-image/{image_id}", response_model=ApiResponse[None])
def delete_product_image(
    image_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Delete a product image (owner only); the stored file is removed
    best-effort.
    """
    service.delete_product_image(session, current_user, image_id)
    return ApiResponse(message="Image deleted successfully")


@router.post(
    "/profile-image",
    response_model=ApiResponse[UploadedImage],
    summary="Upload or replace the caller's profile image",
)
def upload_profile_image(
    image: UploadFile = File(...),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    data = service.upload_profile_image(
        session,
        current_user,
        content_type=image.content_type,
        file_bytes=image.file.read(),
    )
    return ApiResponse(message="Profile image uploaded successfully", data=data)
