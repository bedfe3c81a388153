"""
Inventory Auth API - Common Schemas
Base models and enums shared across the application
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel
from enum import Enum


# ==================== Enums ====================

class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


# ==================== Base Response Models ====================

class BaseResponse(BaseModel):
    """Base response model."""
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = False
    error: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
