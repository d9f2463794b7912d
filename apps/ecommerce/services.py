"""
E-commerce Setup Services
"""
import logging
from uuid import UUID

from django.utils import timezone

from apps.core.audit import record_audit
from apps.core.authentication import AuthenticatedUser
from apps.core.exceptions import ConflictError, NotFoundError
from apps.core.models import ECommerceSetup
from apps.core.selectors import get_visible_profile
from apps.core.workflows import SetupStatus, WorkflowError, reopen_target

from .selectors import get_setup

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ['store_name', 'store_url', 'platform', 'store_details', 'notes']


def _load_setup(setup_id: UUID) -> ECommerceSetup:
    setup = get_setup(setup_id)
    if setup is None:
        raise NotFoundError('E-commerce setup not found')
    return setup


def create_setup(*, actor: AuthenticatedUser, data: dict) -> ECommerceSetup:
    get_visible_profile(actor, data['user_id'])
    setup = ECommerceSetup(
        user_id=data['user_id'],
        status=data.get('status') or SetupStatus.PENDING,
        created_by=actor.id,
    )
    for name in EDITABLE_FIELDS:
        setattr(setup, name, data.get(name) or None)
    setup.save()

    record_audit(
        table_name='ecommerce_setups',
        record_id=setup.id,
        action='created',
        changed_by=actor.id,
        user_id=setup.user_id,
        new_status=setup.status,
    )
    return setup


def update_setup(*, actor: AuthenticatedUser, setup_id: UUID, data: dict) -> ECommerceSetup:
    """Edit store details. Status changes go through complete/reopen."""
    setup = _load_setup(setup_id)
    get_visible_profile(actor, setup.user_id)
    for name in EDITABLE_FIELDS:
        if name in data:
            setattr(setup, name, data[name] or None)
    setup.save()
    return setup


def complete_setup(*, actor: AuthenticatedUser, setup_id: UUID) -> ECommerceSetup:
    """
    Mark a store setup completed.

    Raises:
        ConflictError: already completed
    """
    setup = _load_setup(setup_id)
    get_visible_profile(actor, setup.user_id)
    old_status = setup.status
    if old_status == SetupStatus.COMPLETED:
        raise ConflictError('Setup is already completed', details={'status': old_status})

    setup.status = SetupStatus.COMPLETED
    setup.completed_by = actor.id
    setup.completed_at = timezone.now()
    setup.save()

    record_audit(
        table_name='ecommerce_setups',
        record_id=setup.id,
        action='completed',
        changed_by=actor.id,
        user_id=setup.user_id,
        old_status=old_status,
        new_status=SetupStatus.COMPLETED,
    )
    return setup


def reopen_setup(*, actor: AuthenticatedUser, setup_id: UUID) -> ECommerceSetup:
    """
    Send a completed setup back to in progress and clear completed_by/at.

    Raises:
        ConflictError: the setup is not completed
    """
    setup = _load_setup(setup_id)
    get_visible_profile(actor, setup.user_id)
    old_status = setup.status
    try:
        target = reopen_target('ecommerce_setups', old_status)
    except WorkflowError as e:
        raise ConflictError(str(e), details={'status': old_status}) from e

    setup.status = target
    setup.completed_by = None
    setup.completed_at = None
    setup.save()

    record_audit(
        table_name='ecommerce_setups',
        record_id=setup.id,
        action='reopened',
        changed_by=actor.id,
        user_id=setup.user_id,
        old_status=old_status,
        new_status=target,
    )
    logger.info(f'E-commerce setup {setup.id} reopened by {actor.id}')
    return setup
