"""
Core Models for the Journey Backend

These are UNMANAGED models that map to existing Supabase PostgreSQL tables.
They do NOT create migrations - Django reads from existing tables.
"""
import uuid

from django.db import connection, models

from .constants import APP_ROLES, DEFAULT_CURRENCY, DOCUMENT_TYPES, ECOMMERCE_PLATFORMS, SESSION_TYPES
from .managers import ProfileManager, UserOwnedManager
from .workflows import (
    DocumentStatus,
    EnrollmentStatus,
    ProgressStatus,
    SetupStatus,
    TaskStatus,
    TradeStatus,
)


def _choices(values: list[str]) -> list[tuple[str, str]]:
    return [(v, v.replace('_', ' ').title()) for v in values]


class Profile(models.Model):
    """
    One row per signed-up user, created by a Supabase auth trigger.
    Maps to: public.profiles (id == auth.users.id)
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    full_name = models.TextField(null=True, blank=True)
    email = models.TextField(null=True, blank=True)
    phone = models.TextField(null=True, blank=True)
    avatar_url = models.TextField(null=True, blank=True)
    assigned_coach = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        db_column='assigned_coach_id',
        related_name='assigned_participants'
    )
    batch_number = models.TextField(null=True, blank=True)
    unique_id = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProfileManager()

    class Meta:
        managed = False
        db_table = 'profiles'

    def __str__(self):
        return self.full_name or self.email or str(self.id)

    @property
    def role(self) -> str | None:
        row = self.roles.order_by('role').first()
        return row.role if row else None

    def regenerate_unique_id(self) -> str | None:
        """
        Ask the database to issue a fresh unique_id for this profile.

        Calls the Supabase RPC regenerate_unique_id(p_user_id).
        """
        with connection.cursor() as cursor:
            cursor.execute('SELECT public.regenerate_unique_id(%s)', [str(self.id)])
            row = cursor.fetchone()
        self.refresh_from_db(fields=['unique_id'])
        return row[0] if row else self.unique_id


class UserRole(models.Model):
    """
    Maps to: public.user_roles
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, db_column='user_id', related_name='roles')
    role = models.CharField(max_length=20, choices=_choices(APP_ROLES))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'user_roles'

    def __str__(self):
        return f'{self.user_id}: {self.role}'


class JourneyStage(models.Model):
    """
    Static ordered catalog of program stages.
    Maps to: public.journey_stages
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.TextField()
    description = models.TextField(null=True, blank=True)
    stage_order = models.IntegerField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'journey_stages'
        ordering = ['stage_order']

    def __str__(self):
        return f'{self.stage_order}. {self.name}'


class ParticipantProgress(models.Model):
    """
    Maps to: public.participant_progress (one row per user and stage)
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, db_column='user_id', related_name='progress')
    stage = models.ForeignKey(JourneyStage, on_delete=models.CASCADE, db_column='stage_id', related_name='progress')
    status = models.CharField(max_length=20, choices=ProgressStatus.choices, default=ProgressStatus.NOT_STARTED)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserOwnedManager()

    class Meta:
        managed = False
        db_table = 'participant_progress'


class Task(models.Model):
    """
    Maps to: public.tasks
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    stage = models.ForeignKey(
        JourneyStage,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        db_column='stage_id',
        related_name='tasks'
    )
    title = models.TextField()
    description = models.TextField(null=True, blank=True)
    guidelines = models.TextField(null=True, blank=True)
    task_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'tasks'
        ordering = ['task_order']

    def __str__(self):
        return self.title


class TaskSubmission(models.Model):
    """
    Maps to: public.task_submissions (one row per user and task)
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, db_column='user_id', related_name='task_submissions')
    task = models.ForeignKey(Task, on_delete=models.CASCADE, db_column='task_id', related_name='submissions')
    submission_notes = models.TextField(null=True, blank=True)
    attachment_url = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=TaskStatus.choices, default=TaskStatus.NOT_STARTED)
    verified_by = models.UUIDField(null=True, blank=True)
    verification_notes = models.TextField(null=True, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    verified_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserOwnedManager()

    class Meta:
        managed = False
        db_table = 'task_submissions'


class Document(models.Model):
    """
    Maps to: public.documents
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, db_column='user_id', related_name='documents')
    document_type = models.CharField(max_length=30, choices=_choices(DOCUMENT_TYPES))
    document_name = models.TextField()
    file_url = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=DocumentStatus.choices, default=DocumentStatus.PENDING)
    reviewed_by = models.UUIDField(null=True, blank=True)
    review_notes = models.TextField(null=True, blank=True)
    submission_notes = models.TextField(null=True, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserOwnedManager()

    class Meta:
        managed = False
        db_table = 'documents'


class Attendance(models.Model):
    """
    Daily check-ins and session attendance.
    Maps to: public.attendance
    """
    TYPE_DAILY = 'daily'
    TYPE_SESSION = 'session'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, db_column='user_id', related_name='attendance')
    attendance_type = models.CharField(
        max_length=20,
        choices=[(TYPE_DAILY, 'Daily'), (TYPE_SESSION, 'Session')],
        default=TYPE_DAILY
    )
    session_name = models.TextField(null=True, blank=True)
    check_in_time = models.DateTimeField(null=True, blank=True)
    check_out_time = models.DateTimeField(null=True, blank=True)
    date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    objects = UserOwnedManager()

    class Meta:
        managed = False
        db_table = 'attendance'


class Trade(models.Model):
    """
    Append-only log of import/export events.
    Maps to: public.trades
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, db_column='user_id', related_name='trades')
    trade_type = models.CharField(max_length=10, choices=[('export', 'Export'), ('import', 'Import')])
    product_service = models.TextField()
    country = models.TextField()
    state = models.TextField(null=True, blank=True)
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    currency = models.CharField(max_length=10, default=DEFAULT_CURRENCY)
    trade_date = models.DateField()
    notes = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=TradeStatus.choices, default=TradeStatus.PENDING)
    attachment_url = models.TextField(null=True, blank=True)
    approved_by = models.UUIDField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    approval_notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = UserOwnedManager()

    class Meta:
        managed = False
        db_table = 'trades'


class EnrollmentSubmission(models.Model):
    """
    Maps to: public.enrollment_submissions (at most one per user)
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, db_column='user_id', related_name='enrollments')
    full_name = models.TextField()
    address = models.TextField(null=True, blank=True)
    city = models.TextField(null=True, blank=True)
    email = models.TextField(null=True, blank=True)
    phone = models.TextField(null=True, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    attachment_url = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=40, choices=EnrollmentStatus.choices, default=EnrollmentStatus.SUBMITTED)
    submitted_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.UUIDField(null=True, blank=True)

    objects = UserOwnedManager()

    class Meta:
        managed = False
        db_table = 'enrollment_submissions'


class ECommerceSetup(models.Model):
    """
    Maps to: public.ecommerce_setups
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, db_column='user_id', related_name='ecommerce_setups')
    store_name = models.TextField(null=True, blank=True)
    store_url = models.TextField(null=True, blank=True)
    platform = models.CharField(max_length=30, null=True, blank=True, choices=_choices(ECOMMERCE_PLATFORMS))
    store_details = models.TextField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=SetupStatus.choices, default=SetupStatus.PENDING)
    created_by = models.UUIDField(null=True, blank=True)
    completed_by = models.UUIDField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserOwnedManager()

    class Meta:
        managed = False
        db_table = 'ecommerce_setups'


class AuditLog(models.Model):
    """
    Append-only status transition log.
    Maps to: public.audit_logs
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = models.UUIDField(null=True, blank=True)
    table_name = models.TextField()
    record_id = models.UUIDField(null=True, blank=True)
    action = models.TextField()
    old_status = models.TextField(null=True, blank=True)
    new_status = models.TextField(null=True, blank=True)
    changed_by = models.UUIDField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'audit_logs'
        ordering = ['-created_at']


class RoleNavigationSetting(models.Model):
    """
    Per-role menu entries: system pages and custom links.
    Maps to: public.role_navigation_settings
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    role = models.CharField(max_length=20, choices=_choices(APP_ROLES))
    page_path = models.TextField()
    label_key = models.TextField()
    icon_name = models.TextField(null=True, blank=True)
    is_visible = models.BooleanField(default=True)
    is_default = models.BooleanField(default=False)
    display_order = models.IntegerField(default=0)
    is_custom = models.BooleanField(default=False)
    custom_label = models.TextField(null=True, blank=True)
    is_external = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        managed = False
        db_table = 'role_navigation_settings'
        ordering = ['display_order']


class Session(models.Model):
    """
    Scheduled program sessions.
    Maps to: public.sessions
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.TextField()
    description = models.TextField(null=True, blank=True)
    session_type = models.CharField(max_length=30, choices=_choices(SESSION_TYPES))
    scheduled_at = models.DateTimeField(null=True, blank=True)
    duration_minutes = models.IntegerField(null=True, blank=True)
    location = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'sessions'
        ordering = ['scheduled_at']


class SpecialSessionLink(models.Model):
    """
    Maps to: public.special_session_links
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    title = models.TextField()
    description = models.TextField(null=True, blank=True)
    link_url = models.TextField()
    session_type = models.CharField(max_length=30, default='special_session')
    target_batch = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    is_completed = models.BooleanField(default=False)
    created_by = models.UUIDField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        managed = False
        db_table = 'special_session_links'
        ordering = ['-created_at']


class UserSessionCompletion(models.Model):
    """
    Maps to: public.user_session_completions
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        db_column='user_id',
        related_name='session_completions'
    )
    session_type = models.CharField(max_length=30, choices=_choices(SESSION_TYPES))
    completed_at = models.DateTimeField(null=True, blank=True)
    marked_by = models.UUIDField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    objects = UserOwnedManager()

    class Meta:
        managed = False
        db_table = 'user_session_completions'


class Notification(models.Model):
    """
    Maps to: public.notifications
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, db_column='user_id', related_name='notifications')
    title = models.TextField()
    message = models.TextField()
    type = models.CharField(max_length=30, default='info')
    is_read = models.BooleanField(default=False)
    link = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = UserOwnedManager()

    class Meta:
        managed = False
        db_table = 'notifications'
        ordering = ['-created_at']


class AppSettings(models.Model):
    """
    Single-row branding and notification settings.
    Maps to: public.app_settings
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    app_name = models.TextField(default='Journey')
    logo_url = models.TextField(null=True, blank=True)
    primary_color = models.TextField(null=True, blank=True)
    secondary_color = models.TextField(null=True, blank=True)
    accent_color = models.TextField(null=True, blank=True)
    font_family = models.TextField(null=True, blank=True)
    email_notifications_enabled = models.BooleanField(default=False)
    whatsapp_notifications_enabled = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        managed = False
        db_table = 'app_settings'
        verbose_name_plural = 'App settings'
