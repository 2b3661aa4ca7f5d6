"""
Domain Events - Comunicação desacoplada entre camadas.

Este módulo define a base para Domain Events, permitindo que o
ciclo de vida das solicitações dispare efeitos colaterais (emails,
métricas) sem conhecer quem os consome.

Características:
- Nomeados no passado (SolicitacaoCriada, não CriarSolicitacao)
- Auto-geração de ID e timestamp
- Serializáveis para transporte via Celery (JSON)
- Rastreáveis via aggregate_id

Fluxo:
    - Use case enfileira eventos no UnitOfWork
    - Eventos são publicados após commit
    - Handlers (síncronos ou Celery) processam eventos
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, ClassVar
import uuid


@dataclass(frozen=False)
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.
    
    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento (para evolução)
    
    Example:
        @dataclass
        class SolicitacaoCriadaEvent(DomainEvent):
            protocolo: str = ""
            
            @property
            def aggregate_type(self) -> str:
                return "Solicitacao"
    """
    
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=datetime.now)
    version: int = 1
    
    _event_type: ClassVar[str] = ""
    
    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")
    
    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Tipo do agregado que gerou este evento (ex: "Solicitacao")."""
        ...
    
    @property
    def event_type(self) -> str:
        """Tipo do evento (nome da classe)."""
        return self.__class__.__name__
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.
        
        O formato é o mesmo enviado ao Celery, por isso
        contém apenas tipos JSON.
        
        Returns:
            Dicionário com dados do evento
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }
    
    def _get_event_data(self) -> Dict[str, Any]:
        """
        Retorna dados específicos do evento.
        
        Por padrão, todos os campos que não pertencem à classe base.
        """
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        """
        Reconstrói evento a partir de dicionário.
        
        Args:
            data: Dicionário no formato produzido por to_dict()
            
        Returns:
            Instância do evento reconstruída
        """
        event_data = data.get("data", {})
        return cls(
            event_id=data.get("event_id", str(uuid.uuid4())),
            aggregate_id=data["aggregate_id"],
            occurred_at=datetime.fromisoformat(data["occurred_at"]),
            version=data.get("version", 1),
            **event_data,
        )
    
    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
