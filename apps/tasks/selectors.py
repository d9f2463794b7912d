"""
Tasks Selectors
"""
from uuid import UUID

from apps.core.authentication import AuthenticatedUser
from apps.core.models import Task, TaskSubmission


def get_task_catalog(participant_id: UUID) -> list[dict]:
    """
    Active tasks in stage then task order, each paired with the
    participant's submission (or None).
    """
    submissions = {
        s.task_id: s
        for s in TaskSubmission.objects.filter(user_id=participant_id)
    }
    tasks = (
        Task.objects
        .filter(is_active=True)
        .select_related('stage')
        .order_by('stage__stage_order', 'task_order')
    )
    return [{'task': task, 'submission': submissions.get(task.id)} for task in tasks]


def get_submissions(
    *,
    viewer: AuthenticatedUser,
    status: str | None = None,
    user_id: UUID | None = None,
):
    """
    Submissions the viewer may review, newest first.

    Args:
        viewer: The authenticated user
        status: Filter by status ('all' or empty for every status)
        user_id: Limit to one participant
    """
    qs = TaskSubmission.objects.visible_to(viewer).select_related('user', 'task')
    if status and status != 'all':
        qs = qs.filter(status=status)
    if user_id:
        qs = qs.filter(user_id=user_id)
    return qs.order_by('-submitted_at')


def get_submission(submission_id: UUID) -> TaskSubmission | None:
    return TaskSubmission.objects.select_related('user', 'task').filter(id=submission_id).first()
