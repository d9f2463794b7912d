"""
E-commerce Selectors
"""
from uuid import UUID

from apps.core.authentication import AuthenticatedUser
from apps.core.constants import ECOMMERCE_STAGE_NAME
from apps.core.models import ECommerceSetup, JourneyStage, ParticipantProgress
from apps.core.selectors import get_scoped_participants, profile_rows


def get_setups(*, viewer: AuthenticatedUser, status: str | None = None, platform: str | None = None):
    """Store setups of the visible participants, newest first."""
    qs = ECommerceSetup.objects.visible_to(viewer).select_related('user')
    if status and status != 'all':
        qs = qs.filter(status=status)
    if platform and platform != 'all':
        qs = qs.filter(platform=platform)
    return qs.order_by('-created_at')


def get_setup(setup_id: UUID) -> ECommerceSetup | None:
    return ECommerceSetup.objects.select_related('user').filter(id=setup_id).first()


def get_ecommerce_stage() -> JourneyStage | None:
    return JourneyStage.objects.filter(name=ECOMMERCE_STAGE_NAME, is_active=True).first()


def get_report_rows(viewer: AuthenticatedUser, batch_number: str | None = None) -> dict:
    profiles = profile_rows(get_scoped_participants(viewer, batch_number))
    user_ids = [p['id'] for p in profiles]
    return {
        'profiles': profiles,
        'setups': list(
            ECommerceSetup.objects
            .visible_to(viewer)
            .for_users(user_ids)
            .values('id', 'user_id', 'platform', 'status', 'store_name', 'created_at')
        ),
    }


def get_stage_overview(viewer: AuthenticatedUser, batch_number: str | None = None, search: str | None = None) -> list[dict]:
    """Visible participants with their E-Commerce Setup stage status."""
    stage = get_ecommerce_stage()
    participants = get_scoped_participants(viewer, batch_number).search(search)
    status_by_user = {}
    if stage is not None:
        status_by_user = {
            str(user_id): status
            for user_id, status in ParticipantProgress.objects
            .filter(stage_id=stage.id)
            .values_list('user_id', 'status')
        }
    return [
        {
            **row,
            'stage_id': str(stage.id) if stage else None,
            'stage_status': status_by_user.get(str(row['id'])) or 'not_started',
        }
        for row in profile_rows(participants)
    ]
