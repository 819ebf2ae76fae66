import django
from django.conf import settings


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without external services")
    if not settings.configured:
        settings.configure(
            SECRET_KEY="graphql-shorts-tests",
            INSTALLED_APPS=[
                "django.contrib.contenttypes",
                "django.contrib.auth",
            ],
            USE_TZ=True,
            USE_I18N=True,
        )
        django.setup()
