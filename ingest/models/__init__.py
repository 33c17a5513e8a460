from .file_record import FileRecord, FileStatus

__all__ = ["FileRecord", "FileStatus"]
