from datetime import date, datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field

from relief_api.models import ReportStatus, ResourceStatus, TaskStatus


# ─── Auth ────────────────────────────────────────────────────────────────────

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    address: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=20)
    role_id: Optional[int] = None


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    user_id: int
    name: str
    email: str
    address: Optional[str] = None
    phone_number: Optional[str] = None
    roles: List[str] = Field(default_factory=list, validation_alias=AliasChoices("role_names", "roles"))

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut


# ─── Emergency reports ───────────────────────────────────────────────────────

class ReportCreate(BaseModel):
    disaster_type: str = Field(..., min_length=1, max_length=100)
    location_desc: str = Field(..., min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class ReportStatusUpdate(BaseModel):
    status: ReportStatus


class ReportOut(BaseModel):
    report_id: int
    user_id: int
    disaster_type: str
    status: ReportStatus
    date_time: datetime
    location_desc: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    reporter_name: Optional[str] = None
    reporter_email: Optional[str] = None

    class Config:
        from_attributes = True


class ReportAnalytics(BaseModel):
    disaster_type: str
    count: int
    pending: int
    in_progress: int
    resolved: int
    cancelled: int


# ─── Rescue tasks ────────────────────────────────────────────────────────────

class TaskCreate(BaseModel):
    report_id: int
    task_description: str = Field(..., min_length=1)
    assigned_worker_id: Optional[int] = None
    remarks: Optional[str] = None


class TaskAssign(BaseModel):
    assigned_worker_id: int


class TaskStatusUpdate(BaseModel):
    task_status: TaskStatus
    remarks: Optional[str] = None


class TaskOut(BaseModel):
    task_id: int
    report_id: int
    task_description: str
    assigned_worker_id: Optional[int] = None
    assigned_worker_name: Optional[str] = None
    task_status: TaskStatus
    assigned_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    remarks: Optional[str] = None
    disaster_type: Optional[str] = None
    location_desc: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    report_status: Optional[ReportStatus] = None
    reporter_name: Optional[str] = None
    reporter_phone: Optional[str] = None

    class Config:
        from_attributes = True


# ─── Shelters ────────────────────────────────────────────────────────────────

class ShelterCreate(BaseModel):
    shelter_name: str = Field(..., min_length=1, max_length=150)
    capacity: int = Field(..., gt=0)
    managed_by: Optional[str] = Field(None, max_length=150)
    street_no: Optional[str] = Field(None, max_length=20)
    street_name: Optional[str] = Field(None, max_length=150)
    shelter_contact: Optional[str] = Field(None, max_length=50)


class OccupancyUpdate(BaseModel):
    current_occupancy: int = Field(..., ge=0)


class ShelterOut(BaseModel):
    shelter_id: int
    shelter_name: str
    managed_by: Optional[str] = None
    capacity: int
    current_occupancy: int
    is_active: bool
    street_no: Optional[str] = None
    street_name: Optional[str] = None
    shelter_contact: Optional[str] = None
    last_updated: Optional[datetime] = None
    occupancy_percentage: float

    class Config:
        from_attributes = True


# ─── Resources & distributions ───────────────────────────────────────────────

class ResourceCreate(BaseModel):
    resource_type: str = Field(..., min_length=1, max_length=100)
    resource_quantity: int = Field(..., gt=0)
    resource_desc: Optional[str] = None
    resource_expiry_date: Optional[date] = None
    distribution_location_address: Optional[str] = Field(None, max_length=255)


class ResourceUpdate(BaseModel):
    resource_type: Optional[str] = Field(None, min_length=1, max_length=100)
    resource_quantity: Optional[int] = Field(None, ge=0)
    resource_desc: Optional[str] = None
    resource_expiry_date: Optional[date] = None
    resource_availability_status: Optional[ResourceStatus] = None
    distribution_location_address: Optional[str] = Field(None, max_length=255)


class ResourceOut(BaseModel):
    resource_id: int
    resource_type: str
    resource_quantity: int
    resource_desc: Optional[str] = None
    resource_expiry_date: Optional[date] = None
    resource_availability_status: ResourceStatus
    distribution_location_address: Optional[str] = None
    ngo_id: Optional[int] = None
    ngo_name: Optional[str] = None
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True


class DistributionCreate(BaseModel):
    resource_id: int
    shelter_id: int
    quantity_distributed: int = Field(..., gt=0)
    assigned_to: Optional[int] = None
    remarks: Optional[str] = None


class DistributionStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1, max_length=50)
    dispatched_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None


class DistributionOut(BaseModel):
    distribution_id: int
    resource_id: int
    shelter_id: int
    quantity_distributed: int
    date_distributed: Optional[datetime] = None
    requested_at: Optional[datetime] = None
    dispatched_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    status: str
    assigned_to: Optional[int] = None
    assigned_to_name: Optional[str] = None
    remarks: Optional[str] = None
    resource_type: Optional[str] = None
    resource_desc: Optional[str] = None
    shelter_name: Optional[str] = None

    class Config:
        from_attributes = True


# ─── Notifications ───────────────────────────────────────────────────────────

class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)


class NotificationUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    message: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None


class NotificationOut(BaseModel):
    notification_id: int
    title: str
    message: str
    datetime_sent: datetime
    is_active: bool
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None

    class Config:
        from_attributes = True
