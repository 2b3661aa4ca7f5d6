"""
Domínio de Solicitações.

Ciclo de vida de uma solicitação de marketing: abertura com
protocolo, movimentação no quadro, histórico e eventos.

Exports:
- Entities: SolicitacaoEntity, SolicitacaoStatus, EventoHistorico
- Use Cases: CriarSolicitacaoService, AlterarStatusService, ...
- DTOs: Input/Output DTOs
- Events: Domain events
- Ports: Interfaces para adapters
"""

from .entities import (
    SolicitacaoEntity,
    SolicitacaoStatus,
    EventoHistorico,
    TipoEvento,
    DEPARTAMENTOS,
    TIPOS_SOLICITACAO,
    VEICULACOES,
    prazo_estimado_dias,
)
from .protocolo import gerar_protocolo
from .use_cases import (
    CriarSolicitacaoService,
    AlterarStatusService,
    ListarSolicitacoesService,
    ObterSolicitacaoService,
    LinhaDoTempoService,
)
from .dtos import (
    CriarSolicitacaoInputDTO,
    AlterarStatusInputDTO,
    ArquivoInputDTO,
    SolicitacaoOutputDTO,
    EntradaTimelineDTO,
)
from .events import (
    SolicitacaoCriadaEvent,
    SolicitacaoStatusAlteradoEvent,
    SolicitacaoConcluidaEvent,
    SolicitacaoReabertaEvent,
)
from .ports import (
    SolicitacaoRepository,
    ArquivoStorage,
    Notificador,
    TipoNotificacaoEmail,
)

__all__ = [
    "SolicitacaoEntity",
    "SolicitacaoStatus",
    "EventoHistorico",
    "TipoEvento",
    "DEPARTAMENTOS",
    "TIPOS_SOLICITACAO",
    "VEICULACOES",
    "prazo_estimado_dias",
    "gerar_protocolo",
    "CriarSolicitacaoService",
    "AlterarStatusService",
    "ListarSolicitacoesService",
    "ObterSolicitacaoService",
    "LinhaDoTempoService",
    "CriarSolicitacaoInputDTO",
    "AlterarStatusInputDTO",
    "ArquivoInputDTO",
    "SolicitacaoOutputDTO",
    "EntradaTimelineDTO",
    "SolicitacaoCriadaEvent",
    "SolicitacaoStatusAlteradoEvent",
    "SolicitacaoConcluidaEvent",
    "SolicitacaoReabertaEvent",
    "SolicitacaoRepository",
    "ArquivoStorage",
    "Notificador",
    "TipoNotificacaoEmail",
]
