"""
Relógio do Core.

O Core trabalha com datetimes ingênuos no horário local de
settings.TIME_ZONE, independente do fuso do servidor.
"""

from datetime import datetime

from django.conf import settings
from django.utils import timezone


def agora_local() -> datetime:
    if not settings.USE_TZ:
        return timezone.now()
    return timezone.localtime().replace(tzinfo=None)
