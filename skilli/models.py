import uuid

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

from .database import Base
from .shared.dates import utcnow

# Status vocabularies
REQUEST_OPEN = "open"
REQUEST_IN_PROGRESS = "in_progress"
REQUEST_COMPLETED = "completed"
REQUEST_CANCELLED = "cancelled"
REQUEST_STATUSES = (REQUEST_OPEN, REQUEST_IN_PROGRESS, REQUEST_COMPLETED, REQUEST_CANCELLED)
REQUEST_ACTIVE_STATUSES = (REQUEST_OPEN, REQUEST_IN_PROGRESS)
REQUEST_TERMINAL_STATUSES = (REQUEST_COMPLETED, REQUEST_CANCELLED)

OFFER_PENDING = "pending"
OFFER_ACCEPTED = "accepted"
OFFER_REJECTED = "rejected"

BOOKING_PENDING = "pending"
BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"
BOOKING_COMPLETED = "completed"
BOOKING_ACTIVE_STATUSES = (BOOKING_PENDING, BOOKING_CONFIRMED)

SESSION_SCHEDULED = "scheduled"

PROFILE_DRAFT = "DRAFT"
PROFILE_PENDING_REVIEW = "PENDING_REVIEW"
PROFILE_APPROVED = "APPROVED"
PROFILE_SUSPENDED = "SUSPENDED"


def generate_uuid():
    """Generate a UUID string primary key"""
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    is_provider = Column(Boolean, default=False, nullable=False)
    is_client = Column(Boolean, default=True, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    profile = relationship(
        "ProviderProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    refresh_tokens = relationship(
        "RefreshToken", back_populates="user", cascade="all, delete-orphan"
    )
    notifications = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan"
    )


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    token_hash = Column(String(128), unique=True, index=True, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="refresh_tokens")


class ProviderProfile(Base):
    __tablename__ = "provider_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True
    )
    bio = Column(Text, nullable=True)
    photo = Column(String(500), nullable=True)  # Relative URL under /uploads
    city = Column(String(100), nullable=True)
    languages = Column(JSON, default=list, nullable=False)
    level = Column(String(50), nullable=True)  # Education level (Bac, Bac+2, ...)
    skills = Column(JSON, default=list, nullable=False)
    categories = Column(JSON, default=list, nullable=False)
    teaching_format = Column(String(20), nullable=True)  # ONLINE, IN_PERSON, BOTH
    experience_level = Column(String(50), nullable=True)
    hourly_rate_type = Column(String(20), nullable=True)  # BASIC, STANDARD, PREMIUM, CUSTOM
    hourly_rate_min = Column(Float, nullable=True)
    hourly_rate_max = Column(Float, nullable=True)
    cities = Column(JSON, default=list, nullable=False)
    availability = Column(Text, nullable=True)
    study_year = Column(String(50), nullable=True)
    onboarding_completed = Column(Boolean, default=False, nullable=False)
    # Computed by the backend; APPROVED/SUSPENDED are only set by admins
    profile_status = Column(String(20), default=PROFILE_DRAFT, nullable=False)
    is_phone_verified = Column(Boolean, default=False, nullable=False)
    is_email_verified = Column(Boolean, default=False, nullable=False)
    rating = Column(Float, default=0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="profile")


class SkillSession(Base):
    """A bookable, time-boxed session scheduled by a provider"""

    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    provider_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    skills = Column(JSON, default=list, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # Minutes
    is_online = Column(Boolean, default=True, nullable=False)
    location = Column(String(255), nullable=True)
    price = Column(Float, nullable=False)  # MAD
    max_participants = Column(Integer, default=1, nullable=False)
    status = Column(String(20), default=SESSION_SCHEDULED, nullable=False)
    rating = Column(Float, default=0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    provider = relationship("User")
    bookings = relationship("Booking", back_populates="session", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="session", cascade="all, delete-orphan")

    @property
    def booking_count(self) -> int:
        return len(self.bookings)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (UniqueConstraint("session_id", "client_id", name="uq_booking_session_client"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    session_id = Column(String(36), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), default=BOOKING_PENDING, nullable=False)
    payment_status = Column(String(20), default="pending", nullable=False)
    amount = Column(Float, nullable=False)
    rating = Column(Integer, nullable=True)
    review = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    session = relationship("SkillSession", back_populates="bookings")
    client = relationship("User")


class ServiceRequest(Base):
    """A client's posted need for a skill, open to offers from providers"""

    __tablename__ = "requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    requester_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    skills = Column(JSON, default=list, nullable=False)
    level = Column(String(50), nullable=True)
    location = Column(String(255), nullable=True)
    request_type = Column(String(20), nullable=False)  # online, presential, both
    budget_min = Column(Float, nullable=True)
    budget_max = Column(Float, nullable=True)
    status = Column(String(20), default=REQUEST_OPEN, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    requester = relationship("User")
    offers = relationship(
        "Offer",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="Offer.created_at.desc()",
    )

    @property
    def offer_count(self) -> int:
        return len(self.offers)


class Offer(Base):
    """A provider's bid against a request"""

    __tablename__ = "offers"
    __table_args__ = (UniqueConstraint("request_id", "provider_id", name="uq_offer_request_provider"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    request_id = Column(String(36), ForeignKey("requests.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    duration = Column(Integer, nullable=False)
    first_available_date = Column(DateTime, nullable=True)
    status = Column(String(20), default=OFFER_PENDING, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    request = relationship("ServiceRequest", back_populates="offers")
    provider = relationship("User")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("reviewer_id", "session_id", name="uq_review_reviewer_session"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    reviewer_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id = Column(String(36), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    reviewer = relationship("User", foreign_keys=[reviewer_id])
    provider = relationship("User", foreign_keys=[provider_id])
    session = relationship("SkillSession", back_populates="reviews")


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    author_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    skills = Column(JSON, default=list, nullable=False)
    category = Column(String(100), nullable=True)
    like_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    author = relationship("User")
    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan")


class PostLike(Base):
    __tablename__ = "post_likes"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_like_post_user"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    post = relationship("Post", back_populates="likes")


class Conversation(Base):
    __tablename__ = "conversations"
    # user1_id is always the lexicographically smaller id of the pair
    __table_args__ = (UniqueConstraint("user1_id", "user2_id", name="uq_conversation_pair"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user1_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user2_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    last_message_text = Column(Text, nullable=True)
    last_message_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user1 = relationship("User", foreign_keys=[user1_id])
    user2 = relationship("User", foreign_keys=[user2_id])
    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    conversation_id = Column(
        String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("User", foreign_keys=[sender_id])


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False)  # booking, offer, offer_accepted, message, rating, reminder, update
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    session_id = Column(String(36), nullable=True)
    booking_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)

    user = relationship("User", back_populates="notifications")
