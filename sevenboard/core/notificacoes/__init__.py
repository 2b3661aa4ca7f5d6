"""
Domínio de Notificações.

Alertas de nova solicitação e de prazo, derivados a cada consulta
do estado atual das solicitações e do estado de leitura da sessão.
"""

from .entities import CategoriaNotificacao, EstadoLeitura, NotificacaoRecord
from .deriver import NotificacaoDeriver, tempo_relativo, id_notificacao_prazo
from .ports import EstadoLeituraRepository, InMemoryEstadoLeituraRepository
from .use_cases import (
    ListarNotificacoesService,
    MarcarComoLidaService,
    MarcarTodasComoLidasService,
    ResultadoNotificacoesDTO,
)

__all__ = [
    "CategoriaNotificacao",
    "EstadoLeitura",
    "NotificacaoRecord",
    "NotificacaoDeriver",
    "tempo_relativo",
    "id_notificacao_prazo",
    "EstadoLeituraRepository",
    "InMemoryEstadoLeituraRepository",
    "ListarNotificacoesService",
    "MarcarComoLidaService",
    "MarcarTodasComoLidasService",
    "ResultadoNotificacoesDTO",
]
