"""
Factory Boy Factories for the Journey Models

Import all factories here for easy access in tests.
"""
from tests.factories.core import (
    AuditLogFactory,
    JourneyStageFactory,
    ParticipantProgressFactory,
    ProfileFactory,
    TaskFactory,
    TaskSubmissionFactory,
    UserRoleFactory,
)
from tests.factories.records import (
    AttendanceFactory,
    DocumentFactory,
    ECommerceSetupFactory,
    EnrollmentSubmissionFactory,
    SessionFactory,
    SpecialSessionLinkFactory,
    TradeFactory,
    UserSessionCompletionFactory,
)
from tests.factories.settings import (
    AppSettingsFactory,
    NotificationFactory,
    RoleNavigationSettingFactory,
)

__all__ = [
    # Core
    'ProfileFactory',
    'UserRoleFactory',
    'JourneyStageFactory',
    'ParticipantProgressFactory',
    'TaskFactory',
    'TaskSubmissionFactory',
    'AuditLogFactory',
    # Records
    'DocumentFactory',
    'AttendanceFactory',
    'SessionFactory',
    'SpecialSessionLinkFactory',
    'UserSessionCompletionFactory',
    'TradeFactory',
    'EnrollmentSubmissionFactory',
    'ECommerceSetupFactory',
    # Settings
    'RoleNavigationSettingFactory',
    'NotificationFactory',
    'AppSettingsFactory',
]
