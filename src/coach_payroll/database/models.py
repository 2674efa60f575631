from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, ForeignKeyConstraint, Index, Integer, JSON, Numeric, PrimaryKeyConstraint, String, Text, UniqueConstraint, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
import datetime
import decimal
import uuid


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Base(DeclarativeBase):
    pass


class SystemSettings(Base):
    __tablename__ = 'system_settings'
    __table_args__ = (
        CheckConstraint('coach_monthly_fee > 0', name='positive_monthly_fee'),
        CheckConstraint('global_payment_day BETWEEN 1 AND 31', name='valid_payment_day'),
        PrimaryKeyConstraint('id', name='system_settings_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    coach_monthly_fee: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2))
    global_payment_day: Mapped[int] = mapped_column(Integer)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime(True), default=utcnow, onupdate=utcnow)


class Coaches(Base):
    __tablename__ = 'coaches'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='coaches_pkey'),
        UniqueConstraint('email', name='coaches_email_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(True), default=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Students(Base):
    __tablename__ = 'students'
    __table_args__ = (
        CheckConstraint('package_start_date <= package_end_date', name='package_dates_ordered'),
        ForeignKeyConstraint(['coach_id'], ['coaches.id'], name='students_coach_id_fkey'),
        PrimaryKeyConstraint('id', name='students_pkey'),
        Index('idx_students_coach', 'coach_id'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    coach_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    package_months: Mapped[int] = mapped_column(Integer)
    package_start_date: Mapped[datetime.date] = mapped_column(Date)
    package_end_date: Mapped[datetime.date] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(True), default=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class CoachTransfers(Base):
    """
    Append-only. The integer id doubles as the ingestion sequence that
    orders transfers recorded for the same day.
    """
    __tablename__ = 'coach_transfers'
    __table_args__ = (
        ForeignKeyConstraint(['student_id'], ['students.id'], name='coach_transfers_student_id_fkey'),
        ForeignKeyConstraint(['old_coach_id'], ['coaches.id'], name='coach_transfers_old_coach_id_fkey'),
        ForeignKeyConstraint(['new_coach_id'], ['coaches.id'], name='coach_transfers_new_coach_id_fkey'),
        PrimaryKeyConstraint('id', name='coach_transfers_pkey'),
        Index('idx_coach_transfers_student', 'student_id'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    old_coach_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    new_coach_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    transfer_date: Mapped[datetime.date] = mapped_column(Date)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(True), default=utcnow)


class PaymentRecords(Base):
    __tablename__ = 'payment_records'
    __table_args__ = (
        ForeignKeyConstraint(['coach_id'], ['coaches.id'], name='payment_records_coach_id_fkey'),
        PrimaryKeyConstraint('id', name='payment_records_pkey'),
        Index('idx_payment_records_coach', 'coach_id'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    coach_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    payment_date: Mapped[datetime.date] = mapped_column(Date)
    total_amount: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2))
    student_count: Mapped[int] = mapped_column(Integer)
    # list of {studentId, studentName, amount, daysWorked}
    breakdown: Mapped[list] = mapped_column(JSON().with_variant(JSONB(), 'postgresql'))
    status: Mapped[str] = mapped_column(String(20), default='pending')
    paid_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime(True))
    paid_by: Mapped[Optional[str]] = mapped_column(String(255))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(True), default=utcnow)
