import os

from django.core.exceptions import ValidationError
from PIL import Image, UnidentifiedImageError

MAX_PHOTO_MB = 5
PHOTO_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.webp')


def validate_file_size(value):
    if value.size > MAX_PHOTO_MB * 1024 * 1024:
        raise ValidationError(
            f'Profile photo too large. Size should not exceed {MAX_PHOTO_MB} MB.')


def validate_image_extension(value):
    ext = os.path.splitext(value.name)[1].lower()
    if ext not in PHOTO_EXTENSIONS:
        raise ValidationError(
            f'Unsupported photo type. Allowed: {", ".join(PHOTO_EXTENSIONS)}.')


def validate_image_content(value):
    """Rejects files whose bytes are not a readable image."""
    position = value.tell() if hasattr(value, 'tell') else None
    try:
        with Image.open(value) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError('Uploaded file is not a valid image.')
    finally:
        if position is not None:
            value.seek(position)
