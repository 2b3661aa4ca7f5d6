"""
Domain Events do Domínio de Solicitações.

Eventos disparados quando algo significativo acontece com uma
solicitação. Todos carregam o email do solicitante para que os
handlers decidam se há notificação a enviar.

Eventos:
- SolicitacaoCriadaEvent: Solicitação aberta (bilhete de confirmação)
- SolicitacaoStatusAlteradoEvent: Mudou de coluna no quadro
- SolicitacaoConcluidaEvent: Entrou em DONE
- SolicitacaoReabertaEvent: Voltou de DONE para TODO

Uso:
    with uow:
        repo.save(solicitacao)
        uow.publish_event(SolicitacaoCriadaEvent(...))
"""

from dataclasses import dataclass
from typing import Optional

from sevenboard.core.shared.events import DomainEvent


@dataclass
class SolicitacaoEvent(DomainEvent):
    """Base dos eventos de solicitação."""
    
    protocolo: str = ""
    email: Optional[str] = None
    
    @property
    def aggregate_type(self) -> str:
        return "Solicitacao"


@dataclass
class SolicitacaoCriadaEvent(SolicitacaoEvent):
    """
    Evento: Solicitação foi aberta.
    
    Handlers típicos:
    - Enviar bilhete de confirmação ao solicitante
    """
    
    departamento: str = ""
    tipo_solicitacao: str = ""


@dataclass
class SolicitacaoStatusAlteradoEvent(SolicitacaoEvent):
    """
    Evento: Solicitação mudou de coluna.
    
    Attributes:
        status_anterior: Valor do status de origem
        status_novo: Valor do status de destino
    """
    
    status_anterior: str = ""
    status_novo: str = ""


@dataclass
class SolicitacaoConcluidaEvent(SolicitacaoEvent):
    """
    Evento: Solicitação concluída.
    
    Handlers típicos:
    - Avisar o solicitante que o material está pronto
    """


@dataclass
class SolicitacaoReabertaEvent(SolicitacaoEvent):
    """Evento: Solicitação concluída voltou para Pendente."""
