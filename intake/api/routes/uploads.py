from fastapi import UploadFile

from intake.processor.models import UploadedFile


def read_upload(file: UploadFile | None, max_bytes: int) -> UploadedFile | None:
    """Read at most one byte past ``max_bytes`` so oversize uploads are detected cheaply."""
    if file is None:
        return None
    content = file.file.read(max_bytes + 1)
    return UploadedFile(
        name=file.filename or "",
        media_type=file.content_type or "",
        content=content,
    )
