"""
Core Serializers for the Journey Backend

DRF Serializers for the Supabase tables:
- Read serializers list fields explicitly
- Minimal serializers for nested owner/stage/task representations
- Write serializers validate request bodies before services run
"""
from rest_framework import serializers

from .constants import APP_ROLES, DOCUMENT_TYPES, ECOMMERCE_PLATFORMS, PAGE_META, SESSION_TYPES
from .models import (
    AppSettings,
    Attendance,
    Document,
    ECommerceSetup,
    EnrollmentSubmission,
    Notification,
    Profile,
    RoleNavigationSetting,
    Session,
    SpecialSessionLink,
    Task,
    TaskSubmission,
    Trade,
)
from .workflows import EnrollmentStatus, ProgressStatus, SetupStatus

# Profile Serializers

class ProfileMinimalSerializer(serializers.ModelSerializer):
    """Owner block embedded in submission rows."""

    class Meta:
        model = Profile
        fields = ['id', 'full_name', 'email', 'batch_number']


class ProfileSerializer(serializers.ModelSerializer):
    coach_name = serializers.CharField(source='assigned_coach.full_name', read_only=True, allow_null=True)

    class Meta:
        model = Profile
        fields = [
            'id',
            'full_name',
            'email',
            'phone',
            'avatar_url',
            'assigned_coach_id',
            'coach_name',
            'batch_number',
            'unique_id',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'unique_id', 'created_at', 'updated_at']


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Fields a user may change on their own profile."""

    class Meta:
        model = Profile
        fields = ['full_name', 'phone']


# Journey Serializers

class StageProgressUpdateSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    stage_id = serializers.UUIDField()
    status = serializers.ChoiceField(choices=ProgressStatus.choices)


class EnrollmentSubmissionSerializer(serializers.ModelSerializer):
    user = ProfileMinimalSerializer(read_only=True)

    class Meta:
        model = EnrollmentSubmission
        fields = [
            'id',
            'user',
            'full_name',
            'address',
            'city',
            'email',
            'phone',
            'date_of_birth',
            'notes',
            'attachment_url',
            'status',
            'submitted_at',
            'updated_at',
            'updated_by',
        ]


class EnrollmentWriteSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=200)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    attachment = serializers.FileField(required=False, allow_null=True)


class EnrollmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=EnrollmentStatus.choices)


class SpecialSessionLinkSerializer(serializers.ModelSerializer):

    class Meta:
        model = SpecialSessionLink
        fields = [
            'id',
            'title',
            'description',
            'link_url',
            'session_type',
            'target_batch',
            'is_active',
            'is_completed',
            'created_at',
        ]


# Task Serializers

class TaskSerializer(serializers.ModelSerializer):
    stage_name = serializers.CharField(source='stage.name', read_only=True, allow_null=True)

    class Meta:
        model = Task
        fields = ['id', 'stage_id', 'stage_name', 'title', 'description', 'guidelines', 'task_order', 'is_active']


class TaskMinimalSerializer(serializers.ModelSerializer):

    class Meta:
        model = Task
        fields = ['id', 'title', 'stage_id']


class TaskSubmissionSerializer(serializers.ModelSerializer):
    user = ProfileMinimalSerializer(read_only=True)
    task = TaskMinimalSerializer(read_only=True)

    class Meta:
        model = TaskSubmission
        fields = [
            'id',
            'user',
            'task',
            'submission_notes',
            'attachment_url',
            'status',
            'verified_by',
            'verification_notes',
            'submitted_at',
            'verified_at',
        ]


# Document Serializers

class DocumentSerializer(serializers.ModelSerializer):
    user = ProfileMinimalSerializer(read_only=True)

    class Meta:
        model = Document
        fields = [
            'id',
            'user',
            'document_type',
            'document_name',
            'file_url',
            'status',
            'reviewed_by',
            'review_notes',
            'submission_notes',
            'expiry_date',
            'submitted_at',
            'reviewed_at',
            'created_at',
        ]


class DocumentUploadSerializer(serializers.Serializer):
    document_type = serializers.ChoiceField(choices=DOCUMENT_TYPES)
    document_name = serializers.CharField(required=False, allow_blank=True)
    expiry_date = serializers.DateField(required=False, allow_null=True)
    file = serializers.FileField()


# Attendance Serializers

class AttendanceSerializer(serializers.ModelSerializer):
    user = ProfileMinimalSerializer(read_only=True)

    class Meta:
        model = Attendance
        fields = ['id', 'user', 'attendance_type', 'session_name', 'check_in_time', 'check_out_time', 'date']


class SessionSerializer(serializers.ModelSerializer):

    class Meta:
        model = Session
        fields = [
            'id',
            'name',
            'description',
            'session_type',
            'scheduled_at',
            'duration_minutes',
            'location',
            'is_active',
        ]


class SessionCompletionToggleSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    session_type = serializers.ChoiceField(choices=SESSION_TYPES)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# Trade Serializers

class TradeSerializer(serializers.ModelSerializer):
    user = ProfileMinimalSerializer(read_only=True)

    class Meta:
        model = Trade
        fields = [
            'id',
            'user',
            'trade_type',
            'product_service',
            'country',
            'state',
            'amount',
            'currency',
            'trade_date',
            'notes',
            'status',
            'attachment_url',
            'approved_by',
            'approved_at',
            'approval_notes',
            'created_at',
        ]


class TradeCreateSerializer(serializers.Serializer):
    trade_type = serializers.ChoiceField(choices=['export', 'import'])
    product_service = serializers.CharField()
    country = serializers.CharField()
    state = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0)
    trade_date = serializers.DateField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    attachment = serializers.FileField(
        error_messages={'required': 'A receipt or invoice attachment is required'}
    )


# E-commerce Serializers

class ECommerceSetupSerializer(serializers.ModelSerializer):
    user = ProfileMinimalSerializer(read_only=True)

    class Meta:
        model = ECommerceSetup
        fields = [
            'id',
            'user',
            'store_name',
            'store_url',
            'platform',
            'store_details',
            'notes',
            'status',
            'created_by',
            'completed_by',
            'completed_at',
            'created_at',
        ]


class ECommerceSetupWriteSerializer(serializers.Serializer):
    store_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    store_url = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    platform = serializers.ChoiceField(choices=ECOMMERCE_PLATFORMS, required=False, allow_null=True)
    store_details = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# Review Serializers

class ReviewDecisionSerializer(serializers.Serializer):
    """Body for verify/approve/reject actions on any reviewable record."""
    decision = serializers.ChoiceField(choices=['approve', 'reject'])
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class BulkIdsSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


# Settings Serializers

class RoleNavigationSettingSerializer(serializers.ModelSerializer):

    class Meta:
        model = RoleNavigationSetting
        fields = [
            'id',
            'role',
            'page_path',
            'label_key',
            'icon_name',
            'is_visible',
            'is_default',
            'display_order',
            'is_custom',
            'custom_label',
            'is_external',
        ]
        read_only_fields = ['id']


class NotificationSerializer(serializers.ModelSerializer):

    class Meta:
        model = Notification
        fields = ['id', 'title', 'message', 'type', 'is_read', 'link', 'created_at']


class AppSettingsSerializer(serializers.ModelSerializer):

    class Meta:
        model = AppSettings
        fields = [
            'id',
            'app_name',
            'logo_url',
            'primary_color',
            'secondary_color',
            'accent_color',
            'font_family',
            'email_notifications_enabled',
            'whatsapp_notifications_enabled',
            'updated_at',
        ]
        read_only_fields = ['id', 'updated_at']


# Bulk Serializers

class BulkStageCompleteSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    stage_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class BulkTaskApproveSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    task_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


# Task Write Serializers

class TaskSubmitSerializer(serializers.Serializer):
    task_id = serializers.UUIDField()
    notes = serializers.CharField(
        error_messages={'required': 'Submission notes are required', 'blank': 'Submission notes are required'}
    )
    attachment = serializers.FileField(required=False, allow_null=True)


class SubmitOnBehalfSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    task_id = serializers.UUIDField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# Document Write Serializers

class DocumentSubmitSerializer(serializers.Serializer):
    notes = serializers.CharField(
        error_messages={'required': 'Submission notes are required', 'blank': 'Submission notes are required'}
    )


# Attendance Write Serializers

class AttendanceMarkSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    date = serializers.DateField()
    attendance_type = serializers.ChoiceField(choices=['daily', 'session'], default='daily')
    session_id = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs.get('attendance_type') == 'session' and not attrs.get('session_id'):
            raise serializers.ValidationError({'session_id': 'Select a session'})
        return attrs


class BulkAttendanceSerializer(AttendanceMarkSerializer):
    user_id = None
    user_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class MarkAllPresentSerializer(serializers.Serializer):
    date = serializers.DateField()
    batch_number = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# Owned Stage Serializers

class OwnedStageStatusSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    status = serializers.ChoiceField(choices=ProgressStatus.choices)


class ECommerceSetupCreateSerializer(ECommerceSetupWriteSerializer):
    user_id = serializers.UUIDField()
    store_name = serializers.CharField()
    status = serializers.ChoiceField(choices=SetupStatus.choices, required=False)


# Admin Write Serializers

class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=APP_ROLES)


class CoachAssignSerializer(serializers.Serializer):
    coach_id = serializers.UUIDField(allow_null=True)


class BatchUpdateSerializer(serializers.Serializer):
    user_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    batch_number = serializers.CharField(max_length=50, allow_blank=True, allow_null=True)


# Settings Write Serializers

class NavigationVisibilitySerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=APP_ROLES)
    page_path = serializers.ChoiceField(choices=list(PAGE_META))
    is_visible = serializers.BooleanField()


class NavigationDefaultSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=APP_ROLES)
    page_path = serializers.CharField()


class NavigationReorderSerializer(serializers.Serializer):
    """Page paths for one role in their new menu order."""
    role = serializers.ChoiceField(choices=APP_ROLES)
    page_paths = serializers.ListField(child=serializers.CharField(), allow_empty=False)


class CustomLinkSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=APP_ROLES)
    label = serializers.CharField(max_length=100)
    url = serializers.CharField()
    icon_name = serializers.CharField(required=False, default='LinkIcon')
    is_external = serializers.BooleanField(required=False, default=False)

    def validate_label(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Label is required')
        return value

    def validate_url(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('URL is required')
        return value


class CustomLinkUpdateSerializer(CustomLinkSerializer):
    role = None


class AvatarUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
