from datetime import datetime, timezone
import enum

from sqlalchemy import (
    Column, Integer, String, Boolean, Float, DateTime, Date, ForeignKey, Text, Table,
    CheckConstraint, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship

from relief_api.database import Base


def utcnow():
    return datetime.now(timezone.utc)


def _enum_column(enum_cls):
    # persist the human-readable value ("In Progress"), not the member name
    return SQLEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=32,
    )


class RoleName(str, enum.Enum):
    CITIZEN = "Citizen"
    RESCUE_WORKER = "Rescue Worker"
    NGO = "NGO"
    GOVERNMENT = "Government"


class ReportStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CANCELLED = "Cancelled"


class TaskStatus(str, enum.Enum):
    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ResourceStatus(str, enum.Enum):
    AVAILABLE = "Available"
    DISTRIBUTED = "Distributed"


class DistributionStatus(str, enum.Enum):
    REQUESTED = "Requested"
    DISPATCHED = "Dispatched"
    DELIVERED = "Delivered"


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.role_id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    __tablename__ = "roles"
    role_id = Column(Integer, primary_key=True, index=True)
    role_name = Column(String(50), unique=True, nullable=False)
    role_description = Column(String(255))


class User(Base):
    __tablename__ = "users"
    user_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    address = Column(String(255), nullable=True)
    phone_number = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    roles = relationship("Role", secondary=user_roles, lazy="selectin", order_by="Role.role_id")

    @property
    def role_names(self):
        return [r.role_name for r in self.roles]


class EmergencyReport(Base):
    __tablename__ = "emergency_reports"
    report_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    disaster_type = Column(String(100), nullable=False, index=True)
    status = Column(_enum_column(ReportStatus), nullable=False, default=ReportStatus.PENDING)
    date_time = Column(DateTime(timezone=True), default=utcnow, index=True)
    location_desc = Column(Text, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    reporter = relationship("User", foreign_keys=[user_id])
    tasks = relationship("RescueTask", back_populates="report")

    @property
    def reporter_name(self):
        return self.reporter.name if self.reporter else None

    @property
    def reporter_email(self):
        return self.reporter.email if self.reporter else None


class RescueTask(Base):
    __tablename__ = "rescue_tasks"
    task_id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("emergency_reports.report_id"), nullable=False, index=True)
    task_description = Column(Text, nullable=False)
    assigned_worker_id = Column(Integer, ForeignKey("users.user_id"), nullable=True, index=True)
    task_status = Column(_enum_column(TaskStatus), nullable=False, default=TaskStatus.ASSIGNED)
    assigned_date = Column(DateTime(timezone=True), default=utcnow)
    last_updated = Column(DateTime(timezone=True), default=utcnow)
    remarks = Column(Text, nullable=True)

    report = relationship("EmergencyReport", back_populates="tasks")
    assigned_worker = relationship("User", foreign_keys=[assigned_worker_id])

    @property
    def assigned_worker_name(self):
        return self.assigned_worker.name if self.assigned_worker else None

    @property
    def disaster_type(self):
        return self.report.disaster_type

    @property
    def location_desc(self):
        return self.report.location_desc

    @property
    def latitude(self):
        return self.report.latitude

    @property
    def longitude(self):
        return self.report.longitude

    @property
    def report_status(self):
        return self.report.status

    @property
    def reporter_name(self):
        return self.report.reporter_name

    @property
    def reporter_phone(self):
        return self.report.reporter.phone_number if self.report.reporter else None


class Shelter(Base):
    __tablename__ = "shelters"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_shelter_capacity_positive"),
        CheckConstraint(
            "current_occupancy >= 0 AND current_occupancy <= capacity",
            name="ck_shelter_occupancy_within_capacity",
        ),
    )
    shelter_id = Column(Integer, primary_key=True, index=True)
    shelter_name = Column(String(150), nullable=False)
    managed_by = Column(String(150), nullable=True)
    capacity = Column(Integer, nullable=False)
    current_occupancy = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    street_no = Column(String(20), nullable=True)
    street_name = Column(String(150), nullable=True)
    shelter_contact = Column(String(50), nullable=True)
    last_updated = Column(DateTime(timezone=True), default=utcnow)

    @property
    def occupancy_percentage(self):
        return round(self.current_occupancy / self.capacity * 100, 2)


class Resource(Base):
    __tablename__ = "resources"
    __table_args__ = (
        CheckConstraint("resource_quantity >= 0", name="ck_resource_quantity_non_negative"),
    )
    resource_id = Column(Integer, primary_key=True, index=True)
    resource_type = Column(String(100), nullable=False)
    resource_quantity = Column(Integer, nullable=False)
    resource_desc = Column(Text, nullable=True)
    resource_expiry_date = Column(Date, nullable=True)
    resource_availability_status = Column(
        _enum_column(ResourceStatus), nullable=False, default=ResourceStatus.AVAILABLE
    )
    distribution_location_address = Column(String(255), nullable=True)
    ngo_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    last_updated = Column(DateTime(timezone=True), default=utcnow)

    ngo = relationship("User", foreign_keys=[ngo_id])

    @property
    def ngo_name(self):
        return self.ngo.name if self.ngo else None


class ResourceDistribution(Base):
    __tablename__ = "resource_distributions"
    __table_args__ = (
        CheckConstraint("quantity_distributed > 0", name="ck_distribution_quantity_positive"),
    )
    distribution_id = Column(Integer, primary_key=True, index=True)
    resource_id = Column(Integer, ForeignKey("resources.resource_id"), nullable=False, index=True)
    shelter_id = Column(Integer, ForeignKey("shelters.shelter_id"), nullable=False, index=True)
    quantity_distributed = Column(Integer, nullable=False)
    date_distributed = Column(DateTime(timezone=True), default=utcnow)
    requested_at = Column(DateTime(timezone=True), default=utcnow)
    dispatched_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(50), nullable=False, default=DistributionStatus.REQUESTED.value)
    assigned_to = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    remarks = Column(Text, nullable=True)

    resource = relationship("Resource")
    shelter = relationship("Shelter")
    assignee = relationship("User", foreign_keys=[assigned_to])

    @property
    def resource_type(self):
        return self.resource.resource_type

    @property
    def resource_desc(self):
        return self.resource.resource_desc

    @property
    def shelter_name(self):
        return self.shelter.shelter_name

    @property
    def assigned_to_name(self):
        return self.assignee.name if self.assignee else None


class Notification(Base):
    __tablename__ = "notifications"
    notification_id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    datetime_sent = Column(DateTime(timezone=True), default=utcnow, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=True)

    author = relationship("User", foreign_keys=[created_by])

    @property
    def created_by_name(self):
        return self.author.name if self.author else None
