import logging

from pathlib import Path
from dataclasses import dataclass
from img_resizer import PROGRAM_NAME
from PIL import Image, UnidentifiedImageError
from typing import Iterable, Optional, Tuple
from img_resizer.utils.exceptions import ResizeError

logger = logging.getLogger(__name__)

# форматы без альфа-канала и палитры
RGB_ONLY_EXTENSIONS = {".jpg", ".jpeg", ".jpe", ".jfif"}
RGB_COMPATIBLE_MODES = {"RGB", "L", "CMYK"}


@dataclass(frozen=True)
class ResizeOutcome:
    source: str
    output: str
    size: Optional[Tuple[int, int]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def exit_status(outcomes: Iterable[ResizeOutcome]) -> int:
    """0 если все операции успешны, иначе 1"""
    return 0 if all(outcome.ok for outcome in outcomes) else 1


def target_size(
    source_size: Tuple[int, int], width: int, height: int
) -> Tuple[int, int]:
    """
    Итоговый размер изображения.

    Ноль в одной из сторон - эта сторона считается по пропорциям исходника.
    Ноль в обеих - размер не меняется.
    """
    if width < 0 or height < 0:
        raise ResizeError(
            f"Width and height must not be negative, got {width}x{height}"
        )

    src_width, src_height = source_size
    if width == 0 and height == 0:
        return src_width, src_height
    if width == 0:
        width = max(1, round(src_width * height / src_height))
    elif height == 0:
        height = max(1, round(src_height * width / src_width))
    return width, height


def _prepare_for_output(image: Image.Image, output: Path) -> Image.Image:
    if (
        output.suffix.lower() in RGB_ONLY_EXTENSIONS
        and image.mode not in RGB_COMPATIBLE_MODES
    ):
        return image.convert("RGB")
    return image


def _resize(source: Path, width: int, height: int, output: Path) -> Tuple[int, int]:
    try:
        image = Image.open(source)
    except FileNotFoundError:
        raise ResizeError(f"Could not find file '{source}'")

    with image:
        size = target_size(image.size, width, height)
        resized_image = image.resize(size, Image.Resampling.BICUBIC)

    resized_image = _prepare_for_output(resized_image, output)
    try:
        # формат определяется по расширению output
        resized_image.save(output)
    except (OSError, ValueError) as e:
        raise ResizeError(f"Cannot save '{output}': {e}")

    return size


def resize_image(
    source: str | Path, width: int, height: int, output: str | Path
) -> ResizeOutcome:
    """Загружает изображение, меняет размер и сохраняет. Ошибки не пробрасывает."""
    source_path = Path(source)
    output_path = Path(output)

    try:
        size = _resize(source_path, width, height, output_path)
    except ResizeError as e:
        message = e.message
    except UnidentifiedImageError:
        message = f"Image cannot be loaded. Unknown format: '{source_path}'"
    except Image.DecompressionBombError as e:
        message = f"Image is too big: {e}"
    except OSError as e:
        message = f"Cannot read '{source_path}': {e}"
    except Exception as e:
        message = f"Unexpected error for '{source_path}': {e}"
    else:
        logger.info(
            f"✅ Resized {source_path.name} to {size[0]}x{size[1]} => {output_path}"
        )
        return ResizeOutcome(str(source_path), str(output_path), size=size)

    logger.error(f"{PROGRAM_NAME}: {message}")
    return ResizeOutcome(str(source_path), str(output_path), error=message)
