DEFAULT_CONTENT_TYPE = "text/plain"

CONTENT_TYPES = {
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "ts": "application/typescript",
    "json": "application/json",
    "svg": "image/svg+xml",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "md": "text/markdown",
    "txt": "text/plain",
}


def guess_content_type(file_path: str) -> str:
    name = file_path.rsplit("/", 1)[-1]
    if "." not in name:
        return DEFAULT_CONTENT_TYPE
    ext = name.rsplit(".", 1)[-1].lower()
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)
