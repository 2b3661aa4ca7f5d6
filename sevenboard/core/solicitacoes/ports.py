"""
Ports (Interfaces) do Domínio de Solicitações.

Define os contratos dos colaboradores externos do ciclo de vida:

- SolicitacaoRepository: armazenamento de registros por ID
- ArquivoStorage: armazenamento de anexos (devolve URL pública)
- Notificador: envio de email ao solicitante

Princípio:
    Core define interfaces → Adapters implementam
    
Example:
    class DjangoSolicitacaoRepository:
        def save(self, solicitacao: SolicitacaoEntity) -> None:
            model = SolicitacaoMapper.to_model(solicitacao)
            model.save()
"""

from enum import Enum
from typing import BinaryIO, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from .entities import SolicitacaoEntity, SolicitacaoStatus


@runtime_checkable
class SolicitacaoRepository(Protocol):
    """
    Interface para persistência de Solicitações.
    
    Implementações:
    - DjangoSolicitacaoRepository (ORM)
    - InMemorySolicitacaoRepository (para testes)
    
    Falhas de acesso ao armazenamento devem ser levantadas
    como PersistenceError.
    """
    
    def save(self, solicitacao: SolicitacaoEntity) -> None:
        """Cria ou atualiza (last write wins, sem controle de versão)."""
        ...
    
    def get_by_id(self, solicitacao_id: str) -> Optional[SolicitacaoEntity]:
        ...
    
    def list_all(self) -> List[SolicitacaoEntity]:
        """Todas as solicitações, mais recentes primeiro."""
        ...
    
    def list_by_status(self, status: SolicitacaoStatus) -> List[SolicitacaoEntity]:
        ...


@runtime_checkable
class ArquivoStorage(Protocol):
    """
    Interface para armazenamento de anexos.
    
    Example:
        url = storage.salvar("briefing.pdf", arquivo)
        # "/uploads/1703512200000-123456789.pdf"
    """
    
    def salvar(self, nome_original: str, conteudo: BinaryIO) -> str:
        """Armazena o arquivo com nome único e devolve a URL de acesso."""
        ...


class TipoNotificacaoEmail(Enum):
    """Modelos de email enviados ao solicitante."""
    
    CONFIRMACAO = "confirmacao"
    CONCLUSAO = "conclusao"
    REABERTURA = "reabertura"


@runtime_checkable
class Notificador(Protocol):
    """
    Interface para envio de notificações ao solicitante.
    
    Raises:
        NotificationDispatchError: Se o envio falhar
    """
    
    def notificar(
        self,
        destinatario: str,
        tipo: TipoNotificacaoEmail,
        solicitacao: SolicitacaoEntity,
    ) -> None:
        ...


class InMemorySolicitacaoRepository:
    """
    Implementação em memória do SolicitacaoRepository.
    
    Útil para testes unitários e desenvolvimento local.
    Não usar em produção!
    """
    
    def __init__(self):
        self._solicitacoes: Dict[str, SolicitacaoEntity] = {}
    
    def save(self, solicitacao: SolicitacaoEntity) -> None:
        self._solicitacoes[solicitacao.id] = solicitacao
    
    def get_by_id(self, solicitacao_id: str) -> Optional[SolicitacaoEntity]:
        return self._solicitacoes.get(solicitacao_id)
    
    def list_all(self) -> List[SolicitacaoEntity]:
        return sorted(
            self._solicitacoes.values(),
            key=lambda s: s.criado_em,
            reverse=True,
        )
    
    def list_by_status(self, status: SolicitacaoStatus) -> List[SolicitacaoEntity]:
        return [s for s in self.list_all() if s.status == status]
    
    def count(self) -> int:
        return len(self._solicitacoes)
    
    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._solicitacoes.clear()


class InMemoryArquivoStorage:
    """Guarda anexos em um dicionário; URL = /uploads/<n>-<nome>."""
    
    def __init__(self, base_url: str = "/uploads/"):
        self.base_url = base_url
        self.arquivos: Dict[str, bytes] = {}
    
    def salvar(self, nome_original: str, conteudo: BinaryIO) -> str:
        nome = f"{len(self.arquivos) + 1}-{nome_original}"
        self.arquivos[nome] = conteudo.read()
        return f"{self.base_url}{nome}"


class InMemoryNotificador:
    """Registra as notificações em vez de enviá-las."""
    
    def __init__(self):
        self.enviadas: List[Tuple[str, TipoNotificacaoEmail, str]] = []
    
    def notificar(
        self,
        destinatario: str,
        tipo: TipoNotificacaoEmail,
        solicitacao: SolicitacaoEntity,
    ) -> None:
        self.enviadas.append((destinatario, tipo, solicitacao.protocolo))
