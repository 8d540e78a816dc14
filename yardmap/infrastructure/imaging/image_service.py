# yardmap/infrastructure/imaging/image_service.py
import os

from PIL import Image, UnidentifiedImageError

from yardmap.domain.common.errors import ImageError
from yardmap.domain.common.result import Result
from yardmap.domain.services.i_image_service import IImageService, MapImage
from yardmap.domain.services.i_logger_service import ILoggerService
from yardmap.infrastructure.regions.region_service import normalize_path
from yardmap.infrastructure.resources.resource_loader import file_url_to_path


class PillowImageService(IImageService):
    """Opens map images with Pillow to learn their natural size."""

    def __init__(self, logger: ILoggerService):
        self.logger = logger

    def normalize_path(self, path: str) -> str:
        if path.startswith("file://"):
            return file_url_to_path(path)
        return normalize_path(path)

    def load_image(self, path: str) -> Result[MapImage]:
        if not path:
            return Result.fail(ImageError(message="No map image path configured"))

        if path.startswith(("http://", "https://")):
            return Result.fail(ImageError(
                message="Remote map images are not supported, use a local file",
                details={"path": path}
            ))

        local_path = self.normalize_path(path)
        if not os.path.exists(local_path):
            return Result.fail(ImageError(
                message=f"Map image not found: {local_path}",
                details={"path": local_path}
            ))

        try:
            with Image.open(local_path) as image:
                image.load()
                width, height = image.size
        except (UnidentifiedImageError, OSError) as e:
            error = ImageError(
                message=f"Failed to load map image: {e}",
                details={"path": local_path},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

        self.logger.debug(f"Loaded map image {local_path}", width=width, height=height)
        return Result.ok(MapImage(path=local_path, natural_width=width, natural_height=height))
