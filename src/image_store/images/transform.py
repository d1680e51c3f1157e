"""Pillow-backed resizing of in-memory images."""

import io

from PIL import Image, ImageOps, ImageSequence, UnidentifiedImageError

from image_store.models.errors import ImageTransformError
from image_store.models.image import ImageDimensions

# Animation settings carried over to resized GIF / WebP output
_ANIMATION_INFO_KEYS = ("duration", "loop")


def resize_from_buffer(data: bytes, dimensions: ImageDimensions) -> bytes:
    """Resize encoded image bytes and re-encode them in the source format.

    EXIF orientation is applied first. Images are never enlarged: when the
    source already fits, the original bytes are returned untouched. With both
    sides given the image is scaled to cover the box and centre-cropped;
    with one side the other follows the aspect ratio. Animated GIF and WebP
    sources keep every frame.

    Raises:
        ImageTransformError: If the bytes cannot be decoded or re-encoded
    """
    try:
        with Image.open(io.BytesIO(data)) as source:
            image_format = source.format

            if getattr(source, "is_animated", False):
                target = _target_size(source.size, dimensions)
                if target is None:
                    return data
                return _resize_animation(source, target, dimensions, image_format)

            image = ImageOps.exif_transpose(source)

            target = _target_size(image.size, dimensions)
            if target is None:
                return data

            output = io.BytesIO()
            _resize_frame(image, target, dimensions).save(output, format=image_format)
            return output.getvalue()

    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageTransformError(
            message="Unable to resize image",
            details={"tag": dimensions.tag},
        ) from exc


def _resize_frame(
    image: Image.Image,
    target: tuple[int, int],
    dimensions: ImageDimensions,
) -> Image.Image:
    if dimensions.width and dimensions.height:
        return ImageOps.fit(image, target, method=Image.Resampling.LANCZOS)
    return image.resize(target, Image.Resampling.LANCZOS)


def _resize_animation(
    source: Image.Image,
    target: tuple[int, int],
    dimensions: ImageDimensions,
    image_format: str | None,
) -> bytes:
    frames = [
        _resize_frame(frame.copy(), target, dimensions)
        for frame in ImageSequence.Iterator(source)
    ]
    params = {key: source.info[key] for key in _ANIMATION_INFO_KEYS if key in source.info}

    output = io.BytesIO()
    frames[0].save(
        output,
        format=image_format,
        save_all=True,
        append_images=frames[1:],
        **params,
    )
    return output.getvalue()


def _target_size(
    size: tuple[int, int],
    dimensions: ImageDimensions,
) -> tuple[int, int] | None:
    """Output size for ``dimensions``, or ``None`` when no downscale is needed."""
    width, height = size

    if dimensions.width and dimensions.height:
        if dimensions.width >= width and dimensions.height >= height:
            return None
        return min(dimensions.width, width), min(dimensions.height, height)

    if dimensions.width:
        if dimensions.width >= width:
            return None
        return dimensions.width, max(1, round(height * dimensions.width / width))

    if dimensions.height:
        if dimensions.height >= height:
            return None
        return max(1, round(width * dimensions.height / height)), dimensions.height

    return None
