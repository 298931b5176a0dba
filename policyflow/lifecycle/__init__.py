"""Lifecycle engine: guards and the public policy version service"""

from .schemas import FileUpload
from .service import PolicyVersionService

__all__ = ["FileUpload", "PolicyVersionService"]
