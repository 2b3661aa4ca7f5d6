"""
Use Cases (Application Services) do Domínio de Solicitações.

Use Cases implementados:
- CriarSolicitacaoService: Abre solicitação (protocolo + anexo)
- AlterarStatusService: Move solicitação no quadro
- ListarSolicitacoesService: Lista para o quadro
- ObterSolicitacaoService: Detalhe de uma solicitação
- LinhaDoTempoService: Histórico para exibição

Responsabilidades dos Use Cases:
- Coordenar entidades e colaboradores externos
- Gerenciar transações (via UoW)
- Disparar eventos de domínio (emails saem dos handlers)
- Retornar DTOs de saída
"""

from datetime import datetime
from typing import Callable, List, Optional
import logging

from sevenboard.core.shared.interfaces import UnitOfWork
from sevenboard.core.shared.exceptions import EntityNotFoundError

from .audit_log import CategoriaTimeline, decodificar
from .dtos import (
    AlterarStatusInputDTO,
    CriarSolicitacaoInputDTO,
    EntradaTimelineDTO,
    SolicitacaoOutputDTO,
)
from .entities import (
    SolicitacaoEntity,
    SolicitacaoStatus,
    TipoEvento,
)
from .events import (
    SolicitacaoConcluidaEvent,
    SolicitacaoCriadaEvent,
    SolicitacaoReabertaEvent,
    SolicitacaoStatusAlteradoEvent,
)
from .ports import ArquivoStorage, SolicitacaoRepository

logger = logging.getLogger(__name__)

Relogio = Callable[[], datetime]


def _buscar(repo: SolicitacaoRepository, solicitacao_id: str) -> SolicitacaoEntity:
    solicitacao = repo.get_by_id(solicitacao_id)
    if not solicitacao:
        raise EntityNotFoundError(
            f"Solicitação {solicitacao_id} não encontrada",
            entity_type="Solicitacao",
            entity_id=solicitacao_id,
        )
    return solicitacao


class CriarSolicitacaoService:
    """
    Use Case: Abrir uma nova solicitação.
    
    Fluxo:
    1. Armazenar anexo (se houver)
    2. Criar entidade (protocolo calculado aqui)
    3. Persistir via repositório
    4. Disparar evento SolicitacaoCriada (bilhete por email)
    5. Retornar DTO de saída
    
    Example:
        service = CriarSolicitacaoService(repo, uow, storage)
        output = service.execute(CriarSolicitacaoInputDTO(
            departamento="Marketing",
            descricao="Vídeo institucional",
            data_entrega="2023-12-25",
            veiculacao=("Digital",),
        ))
        output.protocolo  # "7BD-D-MAR-25122023"
    """
    
    def __init__(
        self,
        solicitacao_repo: SolicitacaoRepository,
        uow: UnitOfWork,
        arquivo_storage: Optional[ArquivoStorage] = None,
        relogio: Relogio = datetime.now,
    ):
        self.solicitacao_repo = solicitacao_repo
        self.uow = uow
        self.arquivo_storage = arquivo_storage
        self.relogio = relogio
    
    def execute(self, input_dto: CriarSolicitacaoInputDTO) -> SolicitacaoOutputDTO:
        """
        Raises:
            ValidationError: Se dados inválidos
            PersistenceError: Se o armazenamento falhar
        """
        with self.uow:
            arquivo_url = None
            if input_dto.arquivo and self.arquivo_storage:
                arquivo_url = self.arquivo_storage.salvar(
                    input_dto.arquivo.nome, input_dto.arquivo.conteudo
                )
            
            solicitacao = SolicitacaoEntity.criar(
                departamento=input_dto.departamento,
                descricao=input_dto.descricao,
                data_entrega=input_dto.data_entrega,
                tipo_solicitacao=input_dto.tipo_solicitacao,
                veiculacao=list(input_dto.veiculacao),
                email=input_dto.email,
                horario_entrega=input_dto.horario_entrega,
                observacoes=input_dto.observacoes,
                arquivo_url=arquivo_url,
                agora=self.relogio(),
            )
            
            self.solicitacao_repo.save(solicitacao)
            
            self.uow.publish_event(
                SolicitacaoCriadaEvent(
                    aggregate_id=solicitacao.id,
                    protocolo=solicitacao.protocolo,
                    email=solicitacao.email,
                    departamento=solicitacao.departamento,
                    tipo_solicitacao=solicitacao.tipo_solicitacao,
                )
            )
        
        logger.info(f"Solicitação {solicitacao.protocolo} criada ({solicitacao.id})")
        return SolicitacaoOutputDTO.from_entity(solicitacao)


class AlterarStatusService:
    """
    Use Case: Mover solicitação para outra coluna do quadro.
    
    Fluxo:
    1. Buscar solicitação (EntityNotFoundError se não existe)
    2. Aplicar transição na entidade (reabertura, carimbos, histórico)
    3. Persistir alterações
    4. Disparar eventos: StatusAlterado sempre; Reaberta e
       Concluida quando for o caso
    
    Os emails são enviados pelos handlers dos eventos, depois do
    commit. Falha no envio nunca desfaz a transição.
    """
    
    def __init__(
        self,
        solicitacao_repo: SolicitacaoRepository,
        uow: UnitOfWork,
        relogio: Relogio = datetime.now,
    ):
        self.solicitacao_repo = solicitacao_repo
        self.uow = uow
        self.relogio = relogio
    
    def execute(self, input_dto: AlterarStatusInputDTO) -> SolicitacaoOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se a solicitação não existe
            InvalidTransitionError: Se o status não pertence ao quadro
            PersistenceError: Se o armazenamento falhar
        """
        novo_status = SolicitacaoStatus.from_string(input_dto.status)
        
        with self.uow:
            solicitacao = _buscar(self.solicitacao_repo, input_dto.solicitacao_id)
            resultado = solicitacao.alterar_status(novo_status, agora=self.relogio())
            self.solicitacao_repo.save(solicitacao)
            
            comum = dict(
                aggregate_id=solicitacao.id,
                protocolo=solicitacao.protocolo,
                email=solicitacao.email,
            )
            if resultado.reaberta:
                self.uow.publish_event(SolicitacaoReabertaEvent(**comum))
            
            self.uow.publish_event(
                SolicitacaoStatusAlteradoEvent(
                    status_anterior=resultado.status_anterior.value,
                    status_novo=resultado.status_novo.value,
                    **comum,
                )
            )
            
            if resultado.concluida:
                self.uow.publish_event(SolicitacaoConcluidaEvent(**comum))
        
        logger.info(
            f"Solicitação {solicitacao.protocolo}: "
            f"{resultado.status_anterior.value} → {resultado.status_novo.value}"
        )
        return SolicitacaoOutputDTO.from_entity(solicitacao)


class ListarSolicitacoesService:
    """Use Case: Listar solicitações do quadro, mais recentes primeiro."""
    
    def __init__(self, solicitacao_repo: SolicitacaoRepository):
        self.solicitacao_repo = solicitacao_repo
    
    def execute(self, status: Optional[str] = None) -> List[SolicitacaoOutputDTO]:
        if status:
            solicitacoes = self.solicitacao_repo.list_by_status(
                SolicitacaoStatus.from_string(status)
            )
        else:
            solicitacoes = self.solicitacao_repo.list_all()
        
        solicitacoes = sorted(solicitacoes, key=lambda s: s.criado_em, reverse=True)
        return [SolicitacaoOutputDTO.from_entity(s) for s in solicitacoes]


class ObterSolicitacaoService:
    """Use Case: Obter uma solicitação pelo ID."""
    
    def __init__(self, solicitacao_repo: SolicitacaoRepository):
        self.solicitacao_repo = solicitacao_repo
    
    def execute(self, solicitacao_id: str) -> SolicitacaoOutputDTO:
        return SolicitacaoOutputDTO.from_entity(
            _buscar(self.solicitacao_repo, solicitacao_id)
        )


class LinhaDoTempoService:
    """
    Use Case: Montar a linha do tempo de uma solicitação.
    
    Usa o histórico tipado quando ele registra mudanças de status.
    Registros antigos, sem histórico, são reconstruídos a partir
    dos carimbos de data e do log embutido nas observações.
    """
    
    def __init__(self, solicitacao_repo: SolicitacaoRepository):
        self.solicitacao_repo = solicitacao_repo
    
    def execute(self, solicitacao_id: str) -> List[EntradaTimelineDTO]:
        solicitacao = _buscar(self.solicitacao_repo, solicitacao_id)
        
        entradas = [
            EntradaTimelineDTO.em(
                CategoriaTimeline.CRIADA.value,
                solicitacao.criado_em,
                f"Solicitação {solicitacao.protocolo} criada",
            )
        ]
        
        if any(e.tipo == TipoEvento.STATUS_ALTERADO for e in solicitacao.historico):
            entradas.extend(self._do_historico(solicitacao))
        else:
            entradas.extend(self._das_observacoes(solicitacao))
        
        # Entradas sem data interpretável ficam no fim, na ordem do log
        return sorted(
            entradas,
            key=lambda e: (e.quando is None, e.quando or datetime.min),
        )
    
    def _do_historico(self, solicitacao: SolicitacaoEntity) -> List[EntradaTimelineDTO]:
        entradas = []
        for evento in solicitacao.historico:
            if evento.tipo == TipoEvento.REABERTA:
                entradas.append(EntradaTimelineDTO.em(
                    CategoriaTimeline.REABERTA.value, evento.ocorrido_em, "Solicitação reaberta"
                ))
                continue
            if evento.tipo != TipoEvento.STATUS_ALTERADO:
                continue
            
            destino = SolicitacaoStatus.from_string(evento.payload["para"])
            categoria = _categoria_do_status(destino)
            if categoria is None:
                continue
            entradas.append(EntradaTimelineDTO.em(
                categoria.value, evento.ocorrido_em, f"Movida para {destino.rotulo}"
            ))
        return entradas
    
    def _das_observacoes(self, solicitacao: SolicitacaoEntity) -> List[EntradaTimelineDTO]:
        entradas = []
        carimbos = (
            (solicitacao.iniciado_em, CategoriaTimeline.EM_PRODUCAO, "Em produção"),
            (solicitacao.concluido_em, CategoriaTimeline.CONCLUIDA, "Solicitação concluída"),
            (solicitacao.arquivado_em, CategoriaTimeline.ARQUIVADA, "Solicitação arquivada"),
        )
        for quando, categoria, descricao in carimbos:
            if quando:
                entradas.append(EntradaTimelineDTO.em(categoria.value, quando, descricao))
        
        for registro in decodificar(solicitacao.observacoes):
            categoria = registro.categoria
            if categoria is None:
                continue
            entradas.append(EntradaTimelineDTO(
                categoria=categoria.value,
                quando=registro.quando,
                exibicao=registro.exibicao,
                descricao=registro.mensagem,
            ))
        return entradas


def _categoria_do_status(status: SolicitacaoStatus) -> Optional[CategoriaTimeline]:
    if status.em_producao:
        return CategoriaTimeline.EM_PRODUCAO
    if status == SolicitacaoStatus.DONE:
        return CategoriaTimeline.CONCLUIDA
    if status == SolicitacaoStatus.ARCHIVED:
        return CategoriaTimeline.ARQUIVADA
    # Volta para Pendente: coberta pelo evento REABERTA
    return None
