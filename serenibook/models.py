import enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class UserRole(str, enum.Enum):
    PROFESSIONAL = "PROFESSIONAL"
    CLIENT = "CLIENT"


class ProfessionalType(str, enum.Enum):
    """Professional types as stored in the database"""

    LIFE_COACH = "LIFE_COACH"
    PERSONAL_COACH = "PERSONAL_COACH"
    YOGA_TEACHER = "YOGA_TEACHER"
    PILATES_INSTRUCTOR = "PILATES_INSTRUCTOR"
    THERAPIST = "THERAPIST"
    MASSAGE_THERAPIST = "MASSAGE_THERAPIST"
    MEDITATION_TEACHER = "MEDITATION_TEACHER"
    OTHER = "OTHER"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # PROFESSIONAL or CLIENT
    has_profile = Column(Boolean, default=False, nullable=False)  # Onboarding completed
    is_first_visit = Column(Boolean, default=True, nullable=False)  # Dashboard welcome tour
    email_verified_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    professional_profile = relationship(
        "Professional", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    client_profile = relationship(
        "Client", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    reset_tokens = relationship("ResetToken", back_populates="user", cascade="all, delete-orphan")

    @property
    def email_verified(self) -> bool:
        return self.email_verified_at is not None


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    type = Column(String(50), default=ProfessionalType.OTHER.value, nullable=False)
    other_type_details = Column(String(255), nullable=True)
    years_experience = Column(Integer, nullable=True)
    phone = Column(String(30), nullable=True)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    postal_code = Column(String(10), nullable=True)
    bio = Column(Text, nullable=True)
    description = Column(Text, nullable=True)  # "Approach" in the onboarding wizard
    specialties = Column(JSON, default=list, nullable=True)
    certifications = Column(JSON, default=list, nullable=True)
    languages = Column(JSON, default=lambda: ["fr"], nullable=True)
    company_name = Column(String(255), nullable=True)
    siret = Column(String(14), nullable=True)
    website = Column(String(500), nullable=True)
    auto_confirm_bookings = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="professional_profile")
    notification_settings = relationship(
        "NotificationSettings",
        back_populates="professional",
        uselist=False,
        cascade="all, delete-orphan",
    )
    services = relationship("Service", back_populates="professional", cascade="all, delete-orphan")
    availabilities = relationship(
        "Availability", back_populates="professional", cascade="all, delete-orphan"
    )


class NotificationSettings(Base):
    __tablename__ = "notification_settings"

    id = Column(Integer, primary_key=True, index=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), unique=True, nullable=False)
    email_enabled = Column(Boolean, default=True, nullable=False)  # Booking confirmations by email
    sms_enabled = Column(Boolean, default=False, nullable=False)  # Booking confirmations by SMS
    marketing_emails = Column(Boolean, default=False, nullable=False)  # Newsletter opt-in

    professional = relationship("Professional", back_populates="notification_settings")


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    phone = Column(String(30), nullable=True)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    postal_code = Column(String(10), nullable=True)
    notes = Column(Text, nullable=True)
    preferred_language = Column(String(5), default="fr", nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="client_profile")
    bookings = relationship("Booking", back_populates="client")


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)  # Minutes
    price = Column(Float, nullable=False)
    color = Column(String(20), nullable=True)
    max_participants = Column(Integer, default=1, nullable=False)
    type = Column(String(50), nullable=True)  # e.g. individual, group
    location = Column(String(255), nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    professional = relationship("Professional", back_populates="services")
    bookings = relationship("Booking", back_populates="service")


class Availability(Base):
    __tablename__ = "availabilities"
    __table_args__ = (
        UniqueConstraint(
            "professional_id", "day_of_week", "start_time", "end_time", name="uq_availability_slot"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday ... 6 = Saturday
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    created_at = Column(DateTime, server_default=func.now())

    professional = relationship("Professional", back_populates="availabilities")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)
    starts_at = Column(DateTime, nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, confirmed, cancelled
    created_at = Column(DateTime, server_default=func.now())

    service = relationship("Service", back_populates="bookings")
    client = relationship("Client", back_populates="bookings")


class VerificationToken(Base):
    __tablename__ = "verification_tokens"

    id = Column(Integer, primary_key=True, index=True)
    identifier = Column(String(255), index=True, nullable=False)  # Email being verified
    token = Column(String(128), unique=True, index=True, nullable=False)
    expires = Column(DateTime, nullable=False)


class ResetToken(Base):
    __tablename__ = "reset_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(128), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="reset_tokens")
