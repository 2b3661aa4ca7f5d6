"""
Use Cases do Domínio de Notificações.

- ListarNotificacoesService: Deriva a lista para a consulta periódica
- MarcarComoLidaService: Marca uma notificação
- MarcarTodasComoLidasService: Marca todas as notificações atuais

Nenhum destes serviços altera solicitações.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List
import logging

from sevenboard.core.solicitacoes.ports import SolicitacaoRepository

from .deriver import NotificacaoDeriver
from .entities import NotificacaoRecord
from .ports import EstadoLeituraRepository

logger = logging.getLogger(__name__)


@dataclass
class ResultadoNotificacoesDTO:
    notificacoes: List[NotificacaoRecord]

    @property
    def nao_lidas(self) -> int:
        return sum(1 for n in self.notificacoes if not n.lida)

    def to_dict(self) -> dict:
        return {
            "notificacoes": [n.to_dict() for n in self.notificacoes],
            "nao_lidas": self.nao_lidas,
        }


class ListarNotificacoesService:
    """
    Use Case: Recalcular notificações.

    Example:
        service = ListarNotificacoesService(repo, NotificacaoDeriver())
        resultado = service.execute(SessionEstadoLeituraRepository(request.session))
        resultado.nao_lidas
    """

    def __init__(
        self,
        solicitacao_repo: SolicitacaoRepository,
        deriver: NotificacaoDeriver,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.solicitacao_repo = solicitacao_repo
        self.deriver = deriver
        self.relogio = relogio

    def execute(self, estado_repo: EstadoLeituraRepository) -> ResultadoNotificacoesDTO:
        notificacoes = self.deriver.derivar(
            self.solicitacao_repo.list_all(),
            estado_repo.carregar(),
            self.relogio(),
        )
        return ResultadoNotificacoesDTO(notificacoes=notificacoes)


class MarcarComoLidaService:
    """Use Case: Marcar uma notificação como lida (idempotente)."""

    def execute(self, estado_repo: EstadoLeituraRepository, notificacao_id: str) -> bool:
        estado = estado_repo.carregar()
        alterado = estado.marcar_como_lida(notificacao_id)
        if alterado:
            estado_repo.salvar(estado)
        return alterado


class MarcarTodasComoLidasService:
    """Use Case: Marcar como lidas todas as notificações derivadas agora."""

    def __init__(self, listar_service: ListarNotificacoesService):
        self.listar_service = listar_service

    def execute(self, estado_repo: EstadoLeituraRepository) -> int:
        resultado = self.listar_service.execute(estado_repo)
        estado = estado_repo.carregar()
        marcadas = estado.marcar_todas(n.id for n in resultado.notificacoes)
        if marcadas:
            estado_repo.salvar(estado)
        logger.debug(f"{marcadas} notificações marcadas como lidas")
        return marcadas
