"""
Derivação de Notificações.

Recalcula, a cada consulta, duas listas a partir das solicitações:

- Novas solicitações: uma por solicitação em Pendente (todo),
  mais recentes primeiro, com tempo relativo ("há 5 minutos")
- Prazos: solicitações não concluídas/arquivadas cujo prazo
  está a menos de 24h ou venceu há menos de 48h

O resultado é a concatenação das duas (novas primeiro), sem
reordenação nem deduplicação.
"""

from datetime import datetime
from typing import Iterable, List, Optional
import logging
import math

from sevenboard.core.solicitacoes.entities import SolicitacaoEntity, SolicitacaoStatus

from .entities import CategoriaNotificacao, EstadoLeitura, NotificacaoRecord

logger = logging.getLogger(__name__)

PREFIXO_PRAZO = "deadline-"


def id_notificacao_prazo(solicitacao_id: str) -> str:
    return f"{PREFIXO_PRAZO}{solicitacao_id}"


def tempo_relativo(quando: datetime, agora: datetime) -> str:
    """
    Tempo decorrido em pt-BR.
    
    Example:
        tempo_relativo(agora - timedelta(minutes=5), agora)  # "há 5 minutos"
    """
    segundos = (agora - quando).total_seconds()
    if segundos < 60:
        return "agora mesmo"
    
    minutos = int(segundos // 60)
    if minutos < 60:
        return f"há {minutos} minuto" if minutos == 1 else f"há {minutos} minutos"
    
    horas = minutos // 60
    if horas < 24:
        return f"há {horas} hora" if horas == 1 else f"há {horas} horas"
    
    dias = horas // 24
    return f"há {dias} dia" if dias == 1 else f"há {dias} dias"


class NotificacaoDeriver:
    """
    Deriva notificações do estado atual das solicitações.
    
    Attributes:
        alerta_horas: Antecedência para alertar prazo (default 24h)
        atraso_max_horas: Até quando alertar atraso (default 48h)
    """
    
    def __init__(self, alerta_horas: float = 24, atraso_max_horas: float = 48):
        self.alerta_horas = alerta_horas
        self.atraso_max_horas = atraso_max_horas
    
    def derivar(
        self,
        solicitacoes: Iterable[SolicitacaoEntity],
        estado: Optional[EstadoLeitura] = None,
        agora: Optional[datetime] = None,
    ) -> List[NotificacaoRecord]:
        solicitacoes = list(solicitacoes)
        estado = estado or EstadoLeitura()
        agora = agora or datetime.now()
        
        return (
            self.novas_solicitacoes(solicitacoes, estado, agora)
            + self.prazos(solicitacoes, estado, agora)
        )
    
    def novas_solicitacoes(
        self,
        solicitacoes: List[SolicitacaoEntity],
        estado: EstadoLeitura,
        agora: datetime,
    ) -> List[NotificacaoRecord]:
        pendentes = sorted(
            (s for s in solicitacoes if s.status == SolicitacaoStatus.TODO),
            key=lambda s: s.criado_em,
            reverse=True,
        )
        return [
            NotificacaoRecord(
                id=s.id,
                solicitacao_id=s.id,
                categoria=CategoriaNotificacao.NOVA_SOLICITACAO,
                titulo="Nova solicitação",
                mensagem=f"{s.protocolo} - {s.departamento}",
                tempo=tempo_relativo(s.criado_em, agora),
                lida=s.id in estado,
                hoje=s.criado_em.date() == agora.date(),
            )
            for s in pendentes
        ]
    
    def prazos(
        self,
        solicitacoes: List[SolicitacaoEntity],
        estado: EstadoLeitura,
        agora: datetime,
    ) -> List[NotificacaoRecord]:
        notificacoes = []
        for s in solicitacoes:
            if s.status.terminal:
                continue
            horas = s.horas_restantes(agora)
            if horas is None or not self.na_janela(horas):
                continue
            
            atrasada = horas < 0
            notificacao_id = id_notificacao_prazo(s.id)
            notificacoes.append(NotificacaoRecord(
                id=notificacao_id,
                solicitacao_id=s.id,
                categoria=CategoriaNotificacao.PRAZO,
                titulo="Prazo vencido" if atrasada else "Prazo próximo",
                mensagem=f"{s.protocolo} - {s.departamento}",
                tempo="Atrasada" if atrasada else f"Vence em {math.ceil(horas)}h",
                lida=notificacao_id in estado,
                atrasada=atrasada,
                horas_restantes=horas,
            ))
        return notificacoes
    
    def na_janela(self, horas_restantes: float) -> bool:
        """-atraso_max < horas < alerta (limites exclusivos)."""
        return -self.atraso_max_horas < horas_restantes < self.alerta_horas
