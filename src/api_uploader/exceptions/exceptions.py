class BadRequestError(Exception):
    """Raised when the client sends malformed or invalid input"""
    pass


class MissingFileError(BadRequestError):
    """Raised when the expected file part is absent or is not a file"""
    pass


class FileTooLargeError(BadRequestError):
    """Raised when an uploaded file exceeds its size ceiling"""
    pass


class UnsupportedFileTypeError(BadRequestError):
    """Raised when file type is not supported"""
    pass


class UnauthorizedError(Exception):
    """Raised when the bearer token is missing or invalid"""
    pass


class ForbiddenError(Exception):
    """Raised when the caller does not own the resource"""
    pass


class ResourceNotFoundError(Exception):
    """Raised when a resource is not found"""
    pass


class OsException(Exception):
    """Raised when OS-level operations fail"""
    pass


class TranscodingError(Exception):
    """Raised when transcoding operation fails"""
    pass


class ProbeError(Exception):
    """Raised when media probing fails or returns unusable output"""
    pass


class StorageError(Exception):
    """Raised when storage operations fail"""
    pass


class PersistenceError(Exception):
    """Raised when the metadata store cannot persist a change"""
    pass
