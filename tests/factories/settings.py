"""
Settings Factories

Navigation rows, notifications and branding.
"""
import uuid

import factory
from faker import Faker

from apps.core.models import AppSettings, Notification, RoleNavigationSetting
from tests.factories.core import ProfileFactory

fake = Faker()


class RoleNavigationSettingFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = RoleNavigationSetting

    id = factory.LazyFunction(uuid.uuid4)
    role = 'participant'
    page_path = '/dashboard'
    label_key = 'sidebar.dashboard'
    icon_name = 'LayoutDashboard'
    is_visible = True
    is_default = False
    display_order = factory.Sequence(lambda n: n + 1)


class NotificationFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = Notification

    id = factory.LazyFunction(uuid.uuid4)
    user = factory.SubFactory(ProfileFactory)
    title = factory.LazyAttribute(lambda _: fake.sentence(nb_words=3))
    message = factory.LazyAttribute(lambda _: fake.sentence())
    is_read = False


class AppSettingsFactory(factory.django.DjangoModelFactory):

    class Meta:
        model = AppSettings

    id = factory.LazyFunction(uuid.uuid4)
    app_name = 'Journey'
    primary_color = '#1e40af'
