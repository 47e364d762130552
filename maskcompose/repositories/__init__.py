from .image_repository import ImageRepository
from .mask_repository import MaskRepository

__all__ = ["ImageRepository", "MaskRepository"]
