"""
Data models for the sample scanner
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class ScanLogType(str, Enum):
    """Enum for scan audit log types"""
    ERROR = "ERROR"
    INFO = "INFO"
    SCAN_DETECTED = "SCAN_DETECTED"
    SCAN_INVALID = "SCAN_INVALID"
    ITEM_ADDED = "ITEM_ADDED"
    ITEM_SKIPPED = "ITEM_SKIPPED"


class Sample(BaseModel):
    """Canonical sample record as served by the sample directory"""
    id: str = Field(default_factory=lambda: str(uuid4()))
    merchant: str
    sample_type: str = Field(..., alias="productionSampleType")
    design_no: str = Field(..., alias="designNo")
    qr_code_id: Optional[str] = Field(None, alias="qrCodeId")
    pieces: int = Field(default=0)
    updated_at: datetime = Field(default_factory=datetime.utcnow, alias="updatedAt")

    class Config:
        populate_by_name = True


class LineItem(BaseModel):
    """One row of a packing slip"""
    serial_number: int = Field(..., ge=1, alias="srNo")
    merchant: str = ""
    sample_type: str = Field("", alias="productionSampleType")
    design_number: str = Field(..., alias="designNo")
    external_id: Optional[str] = Field(None, alias="qrCodeId")
    quantity: int = Field(default=1, ge=1, alias="totalPieces")

    class Config:
        populate_by_name = True


class ScanLog(BaseModel):
    """Scan audit log model for database operations"""
    id: str = Field(default_factory=lambda: str(uuid4()))
    type: ScanLogType
    description: str
    design_no: Optional[str] = Field(None, alias="designNo")
    qr_code_id: Optional[str] = Field(None, alias="qrCodeId")
    created_at: datetime = Field(default_factory=datetime.utcnow, alias="createdAt")

    class Config:
        populate_by_name = True


# Database creation models (for raw SQL operations)
class SampleCreate(BaseModel):
    """Model for creating or replacing cached samples"""
    merchant: str
    sample_type: str
    design_no: str
    qr_code_id: Optional[str] = None
    pieces: int = 0


class ScanLogCreate(BaseModel):
    """Model for creating scan audit logs"""
    type: ScanLogType
    description: str
    design_no: Optional[str] = None
    qr_code_id: Optional[str] = None
