"""
Data Transfer Objects (DTOs) do Domínio de Solicitações.

DTOs transportam dados entre camadas sem expor as entidades.

Tipos de DTOs:
- Input DTOs: Dados de entrada já limpos pelo formulário/API
- Output DTOs: Formato de resposta da API
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from .audit_log import formatar_timestamp
from .entities import SolicitacaoEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class ArquivoInputDTO:
    """
    Anexo enviado na abertura.
    
    Attributes:
        nome: Nome original do arquivo (usado só pela extensão)
        conteudo: Objeto file-like com os bytes
    """
    
    nome: str
    conteudo: Any


@dataclass(frozen=True)
class CriarSolicitacaoInputDTO:
    """
    DTO de entrada para abrir solicitação.
    
    Imutável (frozen=True) para garantir que dados
    validados não sejam alterados acidentalmente.
    """
    
    departamento: str
    descricao: str
    data_entrega: str
    tipo_solicitacao: str = ""
    email: Optional[str] = None
    veiculacao: tuple = field(default_factory=tuple)  # tuple para ser hashable
    horario_entrega: Optional[str] = None
    observacoes: str = ""
    arquivo: Optional[ArquivoInputDTO] = None


@dataclass(frozen=True)
class AlterarStatusInputDTO:
    """
    DTO de entrada para mover a solicitação no quadro.
    
    Attributes:
        solicitacao_id: ID da solicitação
        status: Valor do status de destino (ex: "done")
    """
    
    solicitacao_id: str
    status: str


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

def _iso(valor) -> Optional[str]:
    return valor.isoformat() if valor else None


@dataclass
class SolicitacaoOutputDTO:
    """
    DTO de saída completo de uma solicitação.
    
    Usado tanto na listagem do quadro quanto no detalhe.
    """
    
    id: str
    protocolo: str
    departamento: str
    email: Optional[str]
    tipo_solicitacao: str
    prazo_estimado_dias: Optional[int]
    descricao: str
    veiculacao: List[str]
    data_entrega: Optional[date]
    horario_entrega: Optional[time]
    observacoes: str
    arquivo_url: Optional[str]
    status: str
    status_rotulo: str
    criado_em: datetime
    atualizado_em: datetime
    iniciado_em: Optional[datetime] = None
    concluido_em: Optional[datetime] = None
    arquivado_em: Optional[datetime] = None
    
    @classmethod
    def from_entity(cls, entity: SolicitacaoEntity) -> "SolicitacaoOutputDTO":
        return cls(
            id=entity.id,
            protocolo=entity.protocolo,
            departamento=entity.departamento,
            email=entity.email,
            tipo_solicitacao=entity.tipo_solicitacao,
            prazo_estimado_dias=entity.prazo_estimado_dias,
            descricao=entity.descricao,
            veiculacao=list(entity.veiculacao),
            data_entrega=entity.data_entrega,
            horario_entrega=entity.horario_entrega,
            observacoes=entity.observacoes,
            arquivo_url=entity.arquivo_url,
            status=entity.status.value,
            status_rotulo=entity.status.rotulo,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            iniciado_em=entity.iniciado_em,
            concluido_em=entity.concluido_em,
            arquivado_em=entity.arquivado_em,
        )
    
    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "protocolo": self.protocolo,
            "departamento": self.departamento,
            "email": self.email,
            "tipo_solicitacao": self.tipo_solicitacao,
            "prazo_estimado_dias": self.prazo_estimado_dias,
            "descricao": self.descricao,
            "veiculacao": self.veiculacao,
            "data_entrega": _iso(self.data_entrega),
            "horario_entrega": (
                self.horario_entrega.strftime("%H:%M") if self.horario_entrega else None
            ),
            "observacoes": self.observacoes,
            "arquivo_url": self.arquivo_url,
            "status": self.status,
            "status_rotulo": self.status_rotulo,
            "criado_em": _iso(self.criado_em),
            "atualizado_em": _iso(self.atualizado_em),
            "iniciado_em": _iso(self.iniciado_em),
            "concluido_em": _iso(self.concluido_em),
            "arquivado_em": _iso(self.arquivado_em),
        }


@dataclass
class EntradaTimelineDTO:
    """
    Item da linha do tempo de uma solicitação.
    
    Attributes:
        categoria: criada, em-producao, concluida, arquivada, reaberta
        quando: Momento interpretado (None se o log trouxe data ilegível)
        exibicao: Texto do momento para exibição
        descricao: Mensagem do evento
    """
    
    categoria: str
    quando: Optional[datetime]
    exibicao: str
    descricao: str
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "categoria": self.categoria,
            "quando": _iso(self.quando),
            "exibicao": self.exibicao,
            "descricao": self.descricao,
        }
    
    @classmethod
    def em(cls, categoria: str, quando: datetime, descricao: str) -> "EntradaTimelineDTO":
        return cls(
            categoria=categoria,
            quando=quando,
            exibicao=formatar_timestamp(quando),
            descricao=descricao,
        )
