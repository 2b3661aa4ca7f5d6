"""
Configurações globais do Pytest para SevenBoard.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas.

Django é configurado aqui (SQLite em memória, email locmem,
eventos síncronos) para que testes de core e de adapters
rodem no mesmo processo.
"""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest


def pytest_configure(config):
    """Configura Django antes dos testes."""
    import django
    from django.conf import settings

    config.addinivalue_line(
        "markers", "integration: testes que usam banco de dados"
    )

    if not settings.configured:
        settings.configure(
            DEBUG=False,
            SECRET_KEY='test-secret-key',
            ALLOWED_HOSTS=['testserver', 'localhost'],
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.admin',
                'django.contrib.auth',
                'django.contrib.contenttypes',
                'django.contrib.sessions',
                'django.contrib.messages',
                'sevenboard.adapters.django_app.solicitacoes',
            ],
            MIDDLEWARE=[
                'django.contrib.sessions.middleware.SessionMiddleware',
                'django.middleware.common.CommonMiddleware',
                'django.contrib.auth.middleware.AuthenticationMiddleware',
                'django.contrib.messages.middleware.MessageMiddleware',
            ],
            TEMPLATES=[{
                'BACKEND': 'django.template.backends.django.DjangoTemplates',
                'APP_DIRS': True,
                'OPTIONS': {
                    'context_processors': [
                        'django.template.context_processors.request',
                        'django.contrib.auth.context_processors.auth',
                        'django.contrib.messages.context_processors.messages',
                    ],
                },
            }],
            ROOT_URLCONF='sevenboard.config.urls',
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='America/Sao_Paulo',
            MEDIA_ROOT=tempfile.mkdtemp(prefix='sevenboard-uploads-'),
            MEDIA_URL='/uploads/',
            EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend',
            DEFAULT_FROM_EMAIL='SevenBoard <no-reply@sevenboard.test>',
            EVENT_PUBLISHER_MODE='sync',
            EMAIL_EM_SEGUNDO_PLANO=False,
            PRAZO_ALERTA_HORAS=24,
            PRAZO_ATRASO_MAX_HORAS=48,
            NOTIFICACOES_POLL_SEGUNDOS=10,
            CELERY_TASK_ALWAYS_EAGER=True,
            CELERY_BROKER_URL='memory://',
            CELERY_RESULT_BACKEND='cache+memory://',
        )
        django.setup()


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def reset_di_container():
    """Cada teste começa com um container limpo."""
    from sevenboard.config.container import reset_container

    reset_container()
    yield
    reset_container()


@pytest.fixture
def agora():
    """Relógio fixo: 20/12/2023 10:00."""
    return datetime(2023, 12, 20, 10, 0, 0)
