# ecofinds/schemas/upload.py
from ecofinds.schemas.common import CamelModel


class UploadedImage(CamelModel):
    id: int
    image_url: str
    is_primary: bool


class UploadedImages(CamelModel):
    images: list[UploadedImage]
