"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events fora do request (EVENT_PUBLISHER_MODE=celery)
- Enviar emails ao solicitante com retry e backoff
- Varredura periódica de prazos (beat)

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)

Uso:
    celery -A sevenboard.config.celery worker -l INFO -Q default,events,notifications
    celery -A sevenboard.config.celery beat -l INFO
"""

import os
from celery import Celery
from kombu import Queue, Exchange

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'sevenboard.config.settings')

app = Celery('sevenboard')

# Configurações CELERY_* do Django
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='America/Sao_Paulo',
    enable_utc=True,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    worker_send_task_events=True,
    task_send_sent_event=True,
)

app.conf.task_default_queue = 'default'

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
)

_HANDLERS = 'sevenboard.adapters.django_app.events.handlers'

app.conf.task_routes = {
    f'{_HANDLERS}.dispatch_domain_event': {'queue': 'events'},
    f'{_HANDLERS}.enviar_email_solicitacao': {'queue': 'notifications'},
}

app.autodiscover_tasks(['sevenboard.adapters.django_app.events'], related_name='handlers')

app.conf.beat_schedule = {
    'verificar-prazos': {
        'task': f'{_HANDLERS}.verificar_prazos',
        'schedule': float(os.environ.get('VERIFICAR_PRAZOS_SEGUNDOS', 3600)),
    },
}
