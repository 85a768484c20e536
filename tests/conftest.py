"""Pytest fixtures for actionkit tests.

Django is configured once with the workbench apps installed; no test touches
the database.
"""

import os

import django
import pytest
from django.conf import settings


def pytest_configure(config):
    if settings.configured:
        return
    settings.configure(
        DEBUG=True,
        SECRET_KEY="test-secret-key",
        ALLOWED_HOSTS=["testserver"],
        INSTALLED_APPS=[
            "django.contrib.admin",
            "django.contrib.auth",
            "django.contrib.contenttypes",
            "django.contrib.sessions",
            "django.contrib.messages",
            "actionkit_django",
            "workbench",
        ],
        MIDDLEWARE=[
            "django.contrib.sessions.middleware.SessionMiddleware",
            "django.contrib.auth.middleware.AuthenticationMiddleware",
            "django.contrib.messages.middleware.MessageMiddleware",
        ],
        DATABASES={"default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}},
        ROOT_URLCONF="workbench.urls",
        TEMPLATES=[
            {
                "BACKEND": "django.template.backends.django.DjangoTemplates",
                "APP_DIRS": True,
                "OPTIONS": {
                    "context_processors": [
                        "django.template.context_processors.request",
                        "django.contrib.auth.context_processors.auth",
                        "django.contrib.messages.context_processors.messages",
                    ],
                },
            },
        ],
        DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
        USE_TZ=True,
    )
    django.setup()


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Reset actionkit settings before each test."""
    from actionkit.config import reload_settings

    for key in list(os.environ):
        if key.startswith("ACTIONS_"):
            monkeypatch.delenv(key)
    reload_settings()
    yield
    reload_settings()


@pytest.fixture
def strict_attributes(monkeypatch):
    from actionkit.config import reload_settings

    monkeypatch.setenv("ACTIONS_STRICT_ATTRIBUTES", "true")
    return reload_settings()


@pytest.fixture
def strict_prefill(monkeypatch):
    from actionkit.config import reload_settings

    monkeypatch.setenv("ACTIONS_STRICT_PREFILL", "true")
    return reload_settings()


class FakePrompter:
    """Scripted prompter recording every question and message."""

    def __init__(self, answers=None, choices=None, confirms=None):
        self.answers = list(answers or [])
        self.choice_answers = list(choices or [])
        self.confirm_answers = list(confirms or [])
        self.questions = []
        self.choice_calls = []
        self.infos = []
        self.errors = []

    def ask(self, question, default=None):
        self.questions.append(question)
        return self.answers.pop(0) if self.answers else ""

    def choice(self, question, choices):
        self.choice_calls.append((question, list(choices)))
        return self.choice_answers.pop(0)

    def confirm(self, question, default=False):
        self.questions.append(question)
        return self.confirm_answers.pop(0) if self.confirm_answers else default

    def info(self, message):
        self.infos.append(message)

    def error(self, message):
        self.errors.append(message)


@pytest.fixture
def prompter():
    return FakePrompter()
