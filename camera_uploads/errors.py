class CameraUploadsError(Exception):
    """Base error for the project."""

class MetadataUnavailable(CameraUploadsError):
    """No usable EXIF date: unsupported type, unreadable image or missing tag."""

class MetadataMalformed(CameraUploadsError):
    """The date tag is present but does not parse."""

class BlankValueError(MetadataMalformed):
    pass

class FilesystemUnreadable(CameraUploadsError):
    pass

class TraversalError(CameraUploadsError):
    pass
