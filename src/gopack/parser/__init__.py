from .dependencies import extract_imports, is_remote_import

__all__ = ["extract_imports", "is_remote_import"]
