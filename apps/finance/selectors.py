"""
Finance Selectors
"""
from apps.core.authentication import AuthenticatedUser
from apps.core.constants import FEES_STAGE_NAME, FEES_STAGE_ORDER
from apps.core.models import JourneyStage, ParticipantProgress
from apps.core.selectors import get_scoped_participants, profile_rows


def get_fee_stage() -> JourneyStage | None:
    """The fee payment stage, by name first and by position otherwise."""
    stages = JourneyStage.objects.filter(is_active=True)
    return stages.filter(name=FEES_STAGE_NAME).first() or stages.filter(stage_order=FEES_STAGE_ORDER).first()


def fee_stage_row(stage: JourneyStage | None) -> dict | None:
    if stage is None:
        return None
    return {'id': stage.id, 'name': stage.name, 'stage_order': stage.stage_order}


def get_finance_rows(viewer: AuthenticatedUser, batch_number: str | None = None, search: str | None = None) -> dict:
    """Participants and their progress rows for the finance screens."""
    participants = get_scoped_participants(viewer, batch_number).search(search)
    return {
        'profiles': profile_rows(participants),
        'progress': list(
            ParticipantProgress.objects
            .visible_to(viewer)
            .values('id', 'user_id', 'stage_id', 'status', 'started_at', 'completed_at')
        ),
        'batches': get_scoped_participants(viewer).batch_numbers(),
    }
