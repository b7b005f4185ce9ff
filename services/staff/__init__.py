"""Staff registry services."""
from .service import STAFF_STATUSES, StaffService, next_staff_id, staff_documents
from .uploads import DOCUMENT_TYPES, IMAGE_TYPES, MAX_UPLOAD_BYTES, InlineFile, decode_data_url, encode_data_url

__all__ = [
    "DOCUMENT_TYPES",
    "IMAGE_TYPES",
    "InlineFile",
    "MAX_UPLOAD_BYTES",
    "STAFF_STATUSES",
    "StaffService",
    "decode_data_url",
    "encode_data_url",
    "next_staff_id",
    "staff_documents",
]
