"""
Entidades do Domínio de Notificações.

Notificações não são persistidas: são recalculadas a cada consulta
a partir das solicitações e do estado de leitura da sessão.

Entidades:
- NotificacaoRecord: Notificação derivada
- CategoriaNotificacao: Nova solicitação ou prazo
- EstadoLeitura: IDs já lidos pela sessão
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Set


class CategoriaNotificacao(Enum):
    NOVA_SOLICITACAO = "nova-solicitacao"
    PRAZO = "prazo"


@dataclass(frozen=True)
class NotificacaoRecord:
    """
    Notificação exibida no sino do quadro.
    
    Attributes:
        id: ID da solicitação (nova) ou "deadline-<id>" (prazo);
            determinístico para o estado de leitura sobreviver às consultas
        solicitacao_id: Solicitação de origem
        categoria: Tipo da notificação
        titulo: Cabeçalho curto
        mensagem: Protocolo e departamento
        tempo: "há 5 minutos", "Vence em 3h", "Atrasada"
        lida: Se o ID está no estado de leitura
        hoje: Se a solicitação foi aberta hoje (apenas novas)
        atrasada: Se o prazo já passou (apenas prazo)
    """
    
    id: str
    solicitacao_id: str
    categoria: CategoriaNotificacao
    titulo: str
    mensagem: str
    tempo: str
    lida: bool = False
    hoje: bool = False
    atrasada: bool = False
    horas_restantes: Optional[float] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "solicitacao_id": self.solicitacao_id,
            "categoria": self.categoria.value,
            "titulo": self.titulo,
            "mensagem": self.mensagem,
            "tempo": self.tempo,
            "lida": self.lida,
            "hoje": self.hoje,
            "atrasada": self.atrasada,
            "horas_restantes": (
                round(self.horas_restantes, 2) if self.horas_restantes is not None else None
            ),
        }


@dataclass
class EstadoLeitura:
    """
    Conjunto de IDs de notificação já lidos.
    
    Marcar como lida é idempotente (união de conjuntos) e nunca
    altera as solicitações.
    
    Example:
        estado = EstadoLeitura()
        estado.marcar_como_lida("deadline-abc")
        estado.marcar_como_lida("deadline-abc")  # sem efeito
    """
    
    ids: Set[str] = field(default_factory=set)
    
    def __contains__(self, notificacao_id: str) -> bool:
        return notificacao_id in self.ids
    
    def marcar_como_lida(self, notificacao_id: str) -> bool:
        """Retorna True se o ID ainda não estava lido."""
        if notificacao_id in self.ids:
            return False
        self.ids.add(notificacao_id)
        return True
    
    def marcar_todas(self, notificacao_ids: Iterable[str]) -> int:
        """Retorna quantos IDs novos foram marcados."""
        novos = set(notificacao_ids) - self.ids
        self.ids |= novos
        return len(novos)
    
    def to_list(self) -> list:
        return sorted(self.ids)
    
    @classmethod
    def from_list(cls, ids: Optional[Iterable[str]]) -> "EstadoLeitura":
        return cls(ids=set(ids or []))
