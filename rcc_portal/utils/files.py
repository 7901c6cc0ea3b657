from fastapi import UploadFile

from rcc_portal.core.config import MAX_UPLOAD_BYTES
from rcc_portal.services.errors import InvalidUploadError
from rcc_portal.services.storage import StoredFile, get_storage

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}
IMAGE_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}

BUCKET_RULES = {
    "event_images": (IMAGE_EXTENSIONS, IMAGE_CONTENT_TYPES),
    "qr_codes": (IMAGE_EXTENSIONS, IMAGE_CONTENT_TYPES),
    "news_images": (IMAGE_EXTENSIONS, IMAGE_CONTENT_TYPES),
    "avatars": (IMAGE_EXTENSIONS, IMAGE_CONTENT_TYPES),
    "registration_proofs": (IMAGE_EXTENSIONS | {"pdf"}, IMAGE_CONTENT_TYPES | {"application/pdf"}),
}


def file_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


async def verify_file_extension(file: UploadFile, bucket: str) -> bool:
    extensions, _ = BUCKET_RULES[bucket]
    return file_extension(file.filename) in extensions


async def verify_file_type(file: UploadFile, bucket: str) -> bool:
    _, content_types = BUCKET_RULES[bucket]
    return (file.content_type or "").lower() in content_types


async def verify_file_size(data: bytes, max_bytes: int = MAX_UPLOAD_BYTES) -> bool:
    return 0 < len(data) <= max_bytes


async def save_upload(file: UploadFile, bucket: str, owner: str) -> StoredFile:
    """Validate an upload against the bucket's rules and store it."""
    if not await verify_file_extension(file, bucket):
        raise InvalidUploadError("Extensão de arquivo não permitida.")
    if not await verify_file_type(file, bucket):
        raise InvalidUploadError("Tipo de arquivo não permitido.")
    # one byte past the limit is enough to reject the file
    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if not await verify_file_size(data, MAX_UPLOAD_BYTES):
        raise InvalidUploadError("Arquivo vazio ou maior que o permitido.")
    return get_storage().save(bucket, owner, file_extension(file.filename), data)
