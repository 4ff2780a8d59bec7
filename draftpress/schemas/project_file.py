from pydantic import BaseModel


class FileListing(BaseModel):
    path: str
    content_type: str


class FileContent(BaseModel):
    path: str
    content: str
    content_type: str


class FileWrite(BaseModel):
    path: str
    content: str
    content_type: str | None = None


class FileWriteResult(BaseModel):
    path: str
    ok: bool
    error: str | None = None


class FilesDeleted(BaseModel):
    deleted: int
