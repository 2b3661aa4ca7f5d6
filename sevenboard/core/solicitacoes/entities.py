"""
Entidades do Domínio de Solicitações.

Este módulo define as entidades que encapsulam as regras do ciclo
de vida de uma solicitação de marketing no quadro SevenBoard.

Entidades:
- SolicitacaoEntity: Agregado principal do domínio
- SolicitacaoStatus: Colunas do quadro
- EventoHistorico: Registro tipado de cada mudança

Regras de Negócio Encapsuladas:
- Validação de dados na abertura
- Protocolo calculado uma única vez
- Carimbo de início/conclusão/arquivamento na primeira entrada
- Registro de reabertura nas observações (append-only)
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional
import re
import uuid

from sevenboard.core.shared.exceptions import (
    ValidationError,
    InvalidTransitionError,
)
from .audit_log import anexar_registro
from .protocolo import gerar_protocolo


# ==============================================================================
# CATÁLOGOS DO FORMULÁRIO DE ABERTURA
# ==============================================================================

DEPARTAMENTOS = [
    "Educação",
    "Evangelismo/MG",
    "IntegraRH",
    "JA/Com/Mus/Univ/MAP",
    "MCA",
    "MDA",
    "Ministerial e Família",
    "MIPES/Esc. Sabatina/ASA",
    "Mordomia e Saúde",
    "Mulher/AFAM",
    "Nutrição",
    "Publicações/EP",
    "Secretaria",
    "Tesouraria",
    "Outros",
]

TIPOS_SOLICITACAO = [
    "Arte para Instagram/Whatsapp (5 dias)",
    "Cobertura de Eventos (20 dias)",
    "Assessoria de Imprensa/Matérias (20 dias)",
    "Vídeo (30 dias)",
    "Identidade visual completa para eventos (30 dias)",
    "Transmissão de Live (30 dias)",
    "Arquivos digitais como boletim informativo (30 dias)",
    "Arquivos como pulseiras, camisetas (10 dias)",
]

VEICULACOES = ["Digital", "Impresso"]

_PRAZO_DIAS = re.compile(r"\((\d+)\s*dias?\)")


def prazo_estimado_dias(tipo_solicitacao: str) -> Optional[int]:
    """
    Prazo de produção sugerido pelo tipo (apenas informativo).
    
    Example:
        prazo_estimado_dias("Vídeo (30 dias)")  # 30
    """
    match = _PRAZO_DIAS.search(tipo_solicitacao or "")
    return int(match.group(1)) if match else None


# ==============================================================================
# STATUS
# ==============================================================================

class SolicitacaoStatus(Enum):
    """
    Colunas do quadro.
    
    Fluxo de Estados:
        TODO → (produção: IN_PROGRESS, VIDEO_MATERIAIS, COBERTURA_EVENTOS,
                ARTE, FAZENDO, APROVACAO, PARADO) → DONE → ARCHIVED
        
        DONE → TODO (reabrir)
    
    Qualquer movimento entre colunas conhecidas é aceito; apenas
    valores fora do quadro são rejeitados.
    """
    
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    VIDEO_MATERIAIS = "video-materiais"
    COBERTURA_EVENTOS = "cobertura-eventos"
    ARTE = "arte"
    FAZENDO = "fazendo"
    APROVACAO = "aprovacao"
    PARADO = "parado"
    DONE = "done"
    ARCHIVED = "archived"
    
    @property
    def rotulo(self) -> str:
        """Nome da coluna exibido no quadro."""
        return _ROTULOS[self]
    
    @property
    def em_producao(self) -> bool:
        return self not in (
            SolicitacaoStatus.TODO,
            SolicitacaoStatus.DONE,
            SolicitacaoStatus.ARCHIVED,
        )
    
    @property
    def terminal(self) -> bool:
        """Concluída ou arquivada: não gera alerta de prazo."""
        return self in (SolicitacaoStatus.DONE, SolicitacaoStatus.ARCHIVED)
    
    @classmethod
    def from_string(cls, value: str) -> "SolicitacaoStatus":
        """
        Converte string para enum.
        
        Args:
            value: Valor ("in-progress") ou nome ("IN_PROGRESS")
            
        Returns:
            SolicitacaoStatus correspondente
            
        Raises:
            InvalidTransitionError: Se o status não existe no quadro
        """
        if isinstance(value, cls):
            return value
        
        if value is not None and not isinstance(value, str):
            raise InvalidTransitionError(f"Status inválido: {value!r}", status=str(value))
        
        texto = (value or "").strip()
        for status in cls:
            if status.value == texto.lower():
                return status
        
        try:
            return cls[texto.upper().replace("-", "_")]
        except KeyError:
            raise InvalidTransitionError(f"Status inválido: {value}", status=value)


_ROTULOS = {
    SolicitacaoStatus.TODO: "Pendente",
    SolicitacaoStatus.IN_PROGRESS: "Em Progresso",
    SolicitacaoStatus.VIDEO_MATERIAIS: "Vídeo/Materiais",
    SolicitacaoStatus.COBERTURA_EVENTOS: "Cobertura de Eventos",
    SolicitacaoStatus.ARTE: "Arte",
    SolicitacaoStatus.FAZENDO: "Fazendo",
    SolicitacaoStatus.APROVACAO: "A Aprovar",
    SolicitacaoStatus.PARADO: "Parado",
    SolicitacaoStatus.DONE: "Concluído",
    SolicitacaoStatus.ARCHIVED: "Arquivado",
}


# ==============================================================================
# HISTÓRICO TIPADO
# ==============================================================================

class TipoEvento(Enum):
    CRIADA = "criada"
    STATUS_ALTERADO = "status_alterado"
    REABERTA = "reaberta"


@dataclass(frozen=True)
class EventoHistorico:
    """Entrada do histórico: {ocorrido_em, tipo, payload}."""
    
    ocorrido_em: datetime
    tipo: TipoEvento
    payload: Dict[str, Any] = field(default_factory=dict)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "ocorrido_em": self.ocorrido_em.isoformat(),
            "tipo": self.tipo.value,
            "payload": dict(self.payload),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventoHistorico":
        return cls(
            ocorrido_em=datetime.fromisoformat(data["ocorrido_em"]),
            tipo=TipoEvento(data["tipo"]),
            payload=dict(data.get("payload") or {}),
        )


@dataclass(frozen=True)
class ResultadoTransicao:
    """Resumo de uma mudança de status aplicada à entidade."""
    
    status_anterior: SolicitacaoStatus
    status_novo: SolicitacaoStatus
    reaberta: bool = False
    
    @property
    def concluida(self) -> bool:
        return self.status_novo == SolicitacaoStatus.DONE


MENSAGEM_REABERTURA = "Solicitação reaberta."


# ==============================================================================
# AGREGADO
# ==============================================================================

@dataclass
class SolicitacaoEntity:
    """
    Entidade de Domínio: Solicitação.
    
    Invariantes:
    - Departamento e descrição são obrigatórios
    - Protocolo é calculado na abertura e nunca recalculado
    - iniciado_em, concluido_em e arquivado_em são definidos na
      primeira entrada no status correspondente e nunca apagados
    - Observações só crescem: eventos são anexados ao final
    
    Attributes:
        id: Identificador único (UUID)
        departamento: Departamento solicitante
        email: Email do solicitante (habilita notificações)
        protocolo: Código legível (7BD-...)
        tipo_solicitacao: Item do catálogo TIPOS_SOLICITACAO
        descricao: Descrição do pedido
        veiculacao: Canais de veiculação, na ordem informada
        data_entrega: Data de entrega
        horario_entrega: Horário de entrega (opcional)
        observacoes: Notas livres + log de eventos
        arquivo_url: URL do anexo (opcional)
        status: Coluna atual
        historico: Eventos tipados, em ordem cronológica
    
    Example:
        solicitacao = SolicitacaoEntity.criar(
            departamento="Marketing",
            descricao="Arte para o congresso jovem",
            data_entrega="2023-12-25",
            veiculacao=["Digital"],
        )
        solicitacao.protocolo  # "7BD-D-MAR-25122023"
        
        solicitacao.alterar_status(SolicitacaoStatus.ARTE)
    """
    
    # Identificação
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    protocolo: str = ""
    
    # Dados da abertura
    departamento: str = ""
    email: Optional[str] = None
    tipo_solicitacao: str = ""
    descricao: str = ""
    veiculacao: List[str] = field(default_factory=list)
    data_entrega: Optional[date] = None
    horario_entrega: Optional[time] = None
    observacoes: str = ""
    arquivo_url: Optional[str] = None
    
    # Estado
    status: SolicitacaoStatus = field(default=SolicitacaoStatus.TODO)
    
    # Timestamps
    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)
    iniciado_em: Optional[datetime] = None
    concluido_em: Optional[datetime] = None
    arquivado_em: Optional[datetime] = None
    
    historico: List[EventoHistorico] = field(default_factory=list)
    
    @classmethod
    def criar(
        cls,
        departamento: str,
        descricao: str,
        data_entrega,
        tipo_solicitacao: str = "",
        veiculacao: Optional[List[str]] = None,
        email: Optional[str] = None,
        horario_entrega=None,
        observacoes: str = "",
        arquivo_url: Optional[str] = None,
        agora: Optional[datetime] = None,
    ) -> "SolicitacaoEntity":
        """
        Factory method para abrir solicitação com validações.
        
        Args:
            departamento: Departamento solicitante
            descricao: Descrição do pedido
            data_entrega: Data de entrega (date ou "YYYY-MM-DD")
            tipo_solicitacao: Tipo do catálogo
            veiculacao: Canais (ex: ["Digital", "Impresso"])
            email: Email para notificações
            horario_entrega: time ou "HH:MM" (opcional)
            observacoes: Notas iniciais
            arquivo_url: URL do anexo já armazenado
            agora: Relógio (default: datetime.now())
            
        Returns:
            Nova SolicitacaoEntity em TODO, com protocolo
            
        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        cls._validar_departamento(departamento)
        cls._validar_descricao(descricao)
        entrega = cls._parse_data(data_entrega)
        horario = cls._parse_horario(horario_entrega)
        agora = agora or datetime.now()
        canais = [c.strip() for c in (veiculacao or []) if c and c.strip()]
        
        solicitacao = cls(
            departamento=departamento.strip(),
            email=(email or "").strip() or None,
            protocolo=gerar_protocolo(canais, departamento.strip(), entrega),
            tipo_solicitacao=(tipo_solicitacao or "").strip(),
            descricao=descricao.strip(),
            veiculacao=canais,
            data_entrega=entrega,
            horario_entrega=horario,
            observacoes=observacoes or "",
            arquivo_url=arquivo_url,
            status=SolicitacaoStatus.TODO,
            criado_em=agora,
            atualizado_em=agora,
        )
        solicitacao._registrar(
            TipoEvento.CRIADA, agora, {"protocolo": solicitacao.protocolo}
        )
        return solicitacao
    
    @classmethod
    def _validar_departamento(cls, departamento: str) -> None:
        if not departamento or not departamento.strip():
            raise ValidationError(
                "Departamento é obrigatório",
                field="departamento"
            )
    
    @classmethod
    def _validar_descricao(cls, descricao: str) -> None:
        if not descricao or not descricao.strip():
            raise ValidationError(
                "Descrição é obrigatória",
                field="descricao"
            )
    
    @classmethod
    def _parse_data(cls, valor) -> date:
        if isinstance(valor, datetime):
            return valor.date()
        if isinstance(valor, date):
            return valor
        if not valor:
            raise ValidationError(
                "Data de entrega é obrigatória",
                field="data_entrega"
            )
        try:
            return date.fromisoformat(str(valor).strip())
        except ValueError:
            raise ValidationError(
                f"Data de entrega inválida: {valor}",
                field="data_entrega"
            )
    
    @classmethod
    def _parse_horario(cls, valor) -> Optional[time]:
        if valor is None or isinstance(valor, time):
            return valor
        texto = str(valor).strip()
        if not texto:
            return None
        try:
            return time.fromisoformat(texto)
        except ValueError:
            raise ValidationError(
                f"Horário de entrega inválido: {valor}",
                field="horario_entrega"
            )
    
    def alterar_status(
        self,
        novo_status: SolicitacaoStatus,
        agora: Optional[datetime] = None,
    ) -> ResultadoTransicao:
        """
        Move a solicitação para outra coluna do quadro.
        
        Efeitos, nesta ordem:
        1. DONE → TODO (reabertura): anexa "Solicitação reaberta."
           às observações
        2. Carimba iniciado_em / concluido_em / arquivado_em se
           ainda não definidos
        3. Registra o evento no histórico tipado
        
        Args:
            novo_status: Coluna de destino
            agora: Relógio (default: datetime.now())
            
        Returns:
            ResultadoTransicao com o status anterior e se houve reabertura
            
        Raises:
            InvalidTransitionError: Se o status não pertence ao quadro
        """
        if not isinstance(novo_status, SolicitacaoStatus):
            novo_status = SolicitacaoStatus.from_string(novo_status)
        
        agora = agora or datetime.now()
        anterior = self.status
        reaberta = (
            anterior == SolicitacaoStatus.DONE
            and novo_status == SolicitacaoStatus.TODO
        )
        
        if reaberta:
            self.observacoes = anexar_registro(
                self.observacoes, MENSAGEM_REABERTURA, agora
            )
            self._registrar(TipoEvento.REABERTA, agora, {"de": anterior.value})
        
        if novo_status.em_producao and self.iniciado_em is None:
            self.iniciado_em = agora
        elif novo_status == SolicitacaoStatus.DONE and self.concluido_em is None:
            self.concluido_em = agora
        elif novo_status == SolicitacaoStatus.ARCHIVED and self.arquivado_em is None:
            self.arquivado_em = agora
        
        self.status = novo_status
        self._registrar(
            TipoEvento.STATUS_ALTERADO,
            agora,
            {"de": anterior.value, "para": novo_status.value},
        )
        self.atualizado_em = agora
        
        return ResultadoTransicao(
            status_anterior=anterior,
            status_novo=novo_status,
            reaberta=reaberta,
        )
    
    def _registrar(self, tipo: TipoEvento, quando: datetime, payload: Dict[str, Any]) -> None:
        self.historico.append(EventoHistorico(ocorrido_em=quando, tipo=tipo, payload=payload))
    
    @property
    def prazo(self) -> Optional[datetime]:
        """Data e horário de entrega; sem horário, fim do dia."""
        if self.data_entrega is None:
            return None
        horario = self.horario_entrega or time(23, 59, 59)
        return datetime.combine(self.data_entrega, horario)
    
    def horas_restantes(self, agora: Optional[datetime] = None) -> Optional[float]:
        """
        Horas até o prazo.
        
        Returns:
            Positivo se dentro do prazo, negativo se atrasada.
            None se sem data de entrega.
        """
        if self.prazo is None:
            return None
        agora = agora or datetime.now()
        return (self.prazo - agora) / timedelta(hours=1)
    
    @property
    def prazo_estimado_dias(self) -> Optional[int]:
        return prazo_estimado_dias(self.tipo_solicitacao)
    
    @property
    def possui_email(self) -> bool:
        """Notificações por email só são enviadas se houver destinatário."""
        return bool(self.email)
    
    def __repr__(self) -> str:
        return (
            f"SolicitacaoEntity("
            f"id={self.id[:8]}..., "
            f"protocolo={self.protocolo}, "
            f"status={self.status.value}"
            f")"
        )
    
    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, SolicitacaoEntity):
            return False
        return self.id == other.id
    
    def __hash__(self) -> int:
        return hash(self.id)
