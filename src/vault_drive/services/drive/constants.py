# Drive MIME types
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
UPLOAD_MIME_TYPE = "application/octet-stream"

# Addressing
ROOT_FOLDER_ID = "root"
DEFAULT_SEARCH_NAME = ".kdbx"

# Key under which the Drive metadata snapshot is persisted next to the local copy
METADATA_KEY = "googledrive.file_metadata"

# Partial response selectors
METADATA_FIELDS = "id,name,version,modifiedTime,md5Checksum,size"
LIST_FIELDS = "nextPageToken,incompleteSearch,files(id,name,mimeType)"

# Download chunk size in bytes
DOWNLOAD_CHUNK_SIZE = 1024 * 1024
