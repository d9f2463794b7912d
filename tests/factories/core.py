"""
Core Model Factories

Factories for profiles, roles, the stage catalog and task submissions.
"""
import uuid

import factory
from django.utils import timezone
from faker import Faker

from apps.core.models import (
    AuditLog,
    JourneyStage,
    ParticipantProgress,
    Profile,
    Task,
    TaskSubmission,
    UserRole,
)

fake = Faker()


class ProfileFactory(factory.django.DjangoModelFactory):
    """Factory for Profile model. No role row means participant."""

    class Meta:
        model = Profile

    id = factory.LazyFunction(uuid.uuid4)
    full_name = factory.LazyAttribute(lambda _: fake.name())
    email = factory.LazyAttribute(lambda _: fake.unique.email())
    phone = factory.LazyAttribute(lambda _: fake.msisdn()[:10])
    batch_number = 'B1'
    unique_id = factory.Sequence(lambda n: f'JRN{n:05d}')
    assigned_coach = None


class UserRoleFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = UserRole

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    role = 'participant'


class JourneyStageFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = JourneyStage

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f'Stage {n}')
    description = factory.LazyAttribute(lambda _: fake.sentence())
    stage_order = factory.Sequence(lambda n: n + 1)
    is_active = True


class ParticipantProgressFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = ParticipantProgress

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    stage = factory.SubFactory(JourneyStageFactory)
    status = 'not_started'

    class Params:
        completed = factory.Trait(
            status='completed',
            started_at=factory.LazyFunction(timezone.now),
            completed_at=factory.LazyFunction(timezone.now),
        )


class TaskFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = Task

    id = factory.LazyFunction(uuid.uuid4)
    stage = factory.SubFactory(JourneyStageFactory)
    title = factory.LazyAttribute(lambda _: fake.sentence(nb_words=4))
    description = factory.LazyAttribute(lambda _: fake.paragraph())
    task_order = factory.Sequence(lambda n: n)
    is_active = True


class TaskSubmissionFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = TaskSubmission

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    task = factory.SubFactory(TaskFactory)
    submission_notes = factory.LazyAttribute(lambda _: fake.sentence())
    status = 'submitted'
    submitted_at = factory.LazyFunction(timezone.now)

    class Params:
        verified = factory.Trait(
            status='verified',
            verified_by=factory.LazyFunction(uuid.uuid4),
            verified_at=factory.LazyFunction(timezone.now),
            verification_notes='Looks good',
        )


class AuditLogFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = AuditLog

    id = factory.LazyFunction(uuid.uuid4)
    table_name = 'task_submissions'
    record_id = factory.LazyFunction(uuid.uuid4)
    action = 'verified'
    old_status = 'submitted'
    new_status = 'verified'
