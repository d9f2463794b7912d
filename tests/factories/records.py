"""
Participant Record Factories

Documents, attendance, sessions, trades, enrollment and store setups.
"""
import uuid
from datetime import date
from decimal import Decimal

import factory
from django.utils import timezone
from faker import Faker

from apps.core.models import (
    Attendance,
    Document,
    ECommerceSetup,
    EnrollmentSubmission,
    Session,
    SpecialSessionLink,
    Trade,
    UserSessionCompletion,
)
from tests.factories.core import ProfileFactory

fake = Faker()


class DocumentFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = Document

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    document_type = 'gst'
    document_name = factory.LazyAttribute(lambda o: f'{o.document_type}.pdf')
    file_url = factory.LazyAttribute(
        lambda o: f'http://localhost:54321/storage/v1/object/public/documents/{o.user.id}/{o.document_type}_1.pdf'
    )
    status = 'pending'


class AttendanceFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = Attendance

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    attendance_type = 'daily'
    date = factory.LazyFunction(timezone.localdate)
    check_in_time = factory.LazyFunction(timezone.now)


class SessionFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = Session

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.LazyAttribute(lambda _: f'{fake.word().title()} Session')
    session_type = 'special_session'
    is_active = True


class SpecialSessionLinkFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = SpecialSessionLink

    id = factory.LazyFunction(uuid.uuid4)
    title = factory.LazyAttribute(lambda _: fake.sentence(nb_words=3))
    link_url = factory.LazyAttribute(lambda _: fake.url())
    target_batch = None
    is_active = True


class UserSessionCompletionFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = UserSessionCompletion

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    session_type = 'offline_orientation'
    completed_at = factory.LazyFunction(timezone.now)


class TradeFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = Trade

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    trade_type = 'export'
    product_service = factory.LazyAttribute(lambda _: fake.word())
    country = factory.LazyAttribute(lambda _: fake.country())
    amount = Decimal('25000.00')
    currency = 'INR'
    trade_date = factory.LazyFunction(date.today)
    status = 'pending'
    attachment_url = 'http://localhost:54321/storage/v1/object/public/documents/receipt.pdf'


class EnrollmentSubmissionFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = EnrollmentSubmission

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    full_name = factory.LazyAttribute(lambda o: o.user.full_name)
    city = factory.LazyAttribute(lambda _: fake.city())
    status = 'submitted'
    submitted_at = factory.LazyFunction(timezone.now)


class ECommerceSetupFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = ECommerceSetup

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    store_name = factory.LazyAttribute(lambda _: fake.company())
    platform = 'amazon'
    status = 'pending'
