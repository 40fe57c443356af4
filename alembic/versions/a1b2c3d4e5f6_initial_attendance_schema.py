"""initial_attendance_schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18 09:00:00.000000

근태 엔진 초기 스키마: 부서/역할/직원, 시프트, 지오펜스, 근태 기록, 정정 요청,
경고, 요약/보고서, 알림.
Initial attendance engine schema: directory, shifts, geofences, records,
corrections, alerts, summaries/reports and notifications.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())


def _updated_at() -> sa.Column:
    return sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now())


def upgrade() -> None:
    # === 직원 디렉터리 (Directory read model) ===
    op.create_table(
        'departments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        _created_at(),
    )
    op.create_table(
        'roles',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('level', sa.Integer(), nullable=False),
        _created_at(),
    )
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('role_id', UUID(as_uuid=True), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('department_id', UUID(as_uuid=True), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('employee_code', sa.String(50), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        _created_at(),
        _updated_at(),
    )
    op.create_index('ix_users_department', 'users', ['department_id'])

    # === 시프트 (Shift policies and assignments) ===
    op.create_table(
        'shift_policies',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('grace_period_minutes', sa.Integer(), server_default='15', nullable=False),
        sa.Column('early_departure_threshold_minutes', sa.Integer(), server_default='15', nullable=False),
        sa.Column('overtime_start_after_minutes', sa.Integer(), server_default='30', nullable=False),
        sa.Column('minimum_work_minutes', sa.Integer(), server_default='480', nullable=False),
        sa.Column('half_day_threshold_minutes', sa.Integer(), server_default='240', nullable=False),
        sa.Column('break_minutes', sa.Integer(), server_default='60', nullable=False),
        sa.Column('is_night_shift', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'employee_shift_assignments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('shift_id', UUID(as_uuid=True), sa.ForeignKey('shift_policies.id'), nullable=False),
        sa.Column('effective_from', sa.Date(), nullable=False),
        sa.Column('effective_to', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('assigned_by', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
    )
    op.create_index('ix_employee_shift_assignments_user_id', 'employee_shift_assignments', ['user_id'])

    # === 지오펜스 (Geofence locations) ===
    op.create_table(
        'geofence_locations',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('radius_meters', sa.Integer(), server_default='100', nullable=False),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        _created_at(),
        _updated_at(),
    )

    # === 근태 기록 (Attendance records) ===
    # 직원+날짜당 1건 — one record per employee per date
    op.create_table(
        'attendance_records',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('shift_id', UUID(as_uuid=True), sa.ForeignKey('shift_policies.id', ondelete='SET NULL'), nullable=True),
        sa.Column('check_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('check_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('working_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('break_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('overtime_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('status', sa.String(30), server_default='present', nullable=False),
        sa.Column('is_late', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('late_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_early_departure', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('early_departure_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('geofence_id', UUID(as_uuid=True), sa.ForeignKey('geofence_locations.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_within_geofence', sa.Boolean(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_manual_entry', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('approved_by', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint('user_id', 'work_date', name='uq_attendance_user_date'),
        sa.CheckConstraint(
            'check_out IS NULL OR check_in IS NULL OR check_out > check_in',
            name='ck_attendance_checkout_after_checkin',
        ),
        sa.CheckConstraint('working_minutes >= 0', name='ck_attendance_working_minutes'),
    )
    op.create_index('ix_attendance_records_date', 'attendance_records', ['work_date'])

    op.create_table(
        'attendance_location_logs',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('attendance_id', UUID(as_uuid=True), sa.ForeignKey('attendance_records.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('log_type', sa.String(30), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('geofence_id', UUID(as_uuid=True), sa.ForeignKey('geofence_locations.id', ondelete='SET NULL'), nullable=True),
        sa.Column('distance_meters', sa.Float(), nullable=True),
        sa.Column('is_within_geofence', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('logged_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_attendance_location_logs_attendance_id', 'attendance_location_logs', ['attendance_id'])

    # === 정정 요청 (Correction requests) ===
    op.create_table(
        'correction_requests',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('attendance_id', UUID(as_uuid=True), sa.ForeignKey('attendance_records.id', ondelete='SET NULL'), nullable=True),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('request_type', sa.String(30), nullable=False),
        sa.Column('original_check_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('original_check_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('requested_check_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('requested_check_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('status', sa.String(30), server_default='pending', nullable=False),
        sa.Column('reviewed_by', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('review_notes', sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index('ix_correction_requests_user_id', 'correction_requests', ['user_id'])

    # === 경고 (Alerts) ===
    op.create_table(
        'attendance_alerts',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('attendance_id', UUID(as_uuid=True), sa.ForeignKey('attendance_records.id', ondelete='SET NULL'), nullable=True),
        sa.Column('alert_type', sa.String(30), nullable=False),
        sa.Column('severity', sa.String(30), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        sa.Column('alert_date', sa.Date(), nullable=False),
        sa.Column('is_resolved', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('resolved_by', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index('ix_attendance_alerts_user_id', 'attendance_alerts', ['user_id'])

    # === 요약/보고서 (Summaries and daily reports) ===
    op.create_table(
        'attendance_summaries',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('total_working_days', sa.Integer(), server_default='0', nullable=False),
        sa.Column('present_days', sa.Integer(), server_default='0', nullable=False),
        sa.Column('absent_days', sa.Integer(), server_default='0', nullable=False),
        sa.Column('late_days', sa.Integer(), server_default='0', nullable=False),
        sa.Column('half_days', sa.Integer(), server_default='0', nullable=False),
        sa.Column('leave_days', sa.Integer(), server_default='0', nullable=False),
        sa.Column('early_departure_days', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_working_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_overtime_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('attendance_percentage', sa.Float(), server_default='0', nullable=False),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint('user_id', 'month', 'year', name='uq_summary_user_period'),
    )
    op.create_table(
        'daily_attendance_reports',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('report_date', sa.Date(), nullable=False, unique=True),
        sa.Column('total_employees', sa.Integer(), server_default='0', nullable=False),
        sa.Column('present_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('absent_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('late_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('half_day_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('on_leave_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('early_departure_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('not_marked_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_working_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_overtime_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('attendance_percentage', sa.Float(), server_default='0', nullable=False),
        _created_at(),
        _updated_at(),
    )

    # === 알림 (Notifications) ===
    op.create_table(
        'notifications',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        sa.Column('reference_type', sa.String(50), nullable=True),
        sa.Column('reference_id', UUID(as_uuid=True), nullable=True),
        sa.Column('is_read', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        _created_at(),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('daily_attendance_reports')
    op.drop_table('attendance_summaries')
    op.drop_table('attendance_alerts')
    op.drop_table('correction_requests')
    op.drop_table('attendance_location_logs')
    op.drop_table('attendance_records')
    op.drop_table('geofence_locations')
    op.drop_table('employee_shift_assignments')
    op.drop_table('shift_policies')
    op.drop_table('users')
    op.drop_table('roles')
    op.drop_table('departments')
