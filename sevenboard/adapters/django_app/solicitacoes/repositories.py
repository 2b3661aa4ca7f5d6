"""
Repositório Django para persistência de Solicitações.

Implementa o SolicitacaoRepository definido no Core.
É um DRIVEN ADAPTER - acionado pelo Core em resposta a operações.

Responsabilidades:
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM
- Converter falhas de banco em PersistenceError

Não há controle de concorrência: duas alterações simultâneas na
mesma solicitação resultam em "last write wins".
"""

from functools import wraps
from typing import List, Optional
import logging

from django.db import DatabaseError

from sevenboard.core.shared.exceptions import PersistenceError
from sevenboard.core.solicitacoes.entities import SolicitacaoEntity, SolicitacaoStatus
from sevenboard.core.solicitacoes.ports import SolicitacaoRepository as SolicitacaoRepositoryPort

from .mappers import SolicitacaoMapper
from .models import SolicitacaoModel

logger = logging.getLogger(__name__)

# Campos gravados no upsert (todos menos a PK)
_CAMPOS = [
    f.name for f in SolicitacaoModel._meta.concrete_fields if not f.primary_key
]


def _persistencia(metodo):
    """Converte DatabaseError em PersistenceError, registrando o detalhe."""
    @wraps(metodo)
    def wrapper(*args, **kwargs):
        try:
            return metodo(*args, **kwargs)
        except DatabaseError as e:
            logger.error(f"Database error in {metodo.__name__}: {e}")
            raise PersistenceError() from e
    return wrapper


class DjangoSolicitacaoRepository(SolicitacaoRepositoryPort):
    """
    Implementação Django do SolicitacaoRepository.
    
    Example:
        repo = DjangoSolicitacaoRepository()
        repo.save(solicitacao)
        solicitacao = repo.get_by_id("uuid-here")
        pendentes = repo.list_by_status(SolicitacaoStatus.TODO)
    """
    
    def __init__(self):
        self._mapper = SolicitacaoMapper()
    
    @_persistencia
    def save(self, solicitacao: SolicitacaoEntity) -> None:
        """
        Persiste solicitação (create ou update).
        
        Note:
            Usa update_or_create; o registro inteiro é sobrescrito
        """
        model = self._mapper.to_model(solicitacao)
        defaults = {campo: getattr(model, campo) for campo in _CAMPOS}
        
        _, criado = SolicitacaoModel.objects.update_or_create(
            id=solicitacao.id,
            defaults=defaults,
        )
        logger.debug(
            f"Solicitação {'criada' if criado else 'atualizada'}: {solicitacao.id}"
        )
    
    @_persistencia
    def get_by_id(self, solicitacao_id: str) -> Optional[SolicitacaoEntity]:
        try:
            model = SolicitacaoModel.objects.get(id=solicitacao_id)
        except SolicitacaoModel.DoesNotExist:
            return None
        return self._mapper.to_entity(model)
    
    @_persistencia
    def list_all(self) -> List[SolicitacaoEntity]:
        """Todas as solicitações, mais recentes primeiro."""
        queryset = SolicitacaoModel.objects.order_by('-criado_em')
        return self._mapper.to_entity_list(list(queryset))
    
    @_persistencia
    def list_by_status(self, status: SolicitacaoStatus) -> List[SolicitacaoEntity]:
        queryset = SolicitacaoModel.objects.filter(status=status.value).order_by('-criado_em')
        return self._mapper.to_entity_list(list(queryset))
    
    @_persistencia
    def list_em_aberto(self) -> List[SolicitacaoEntity]:
        """Solicitações que ainda podem gerar alerta de prazo."""
        queryset = (
            SolicitacaoModel.objects
            .exclude(status__in=[SolicitacaoStatus.DONE.value, SolicitacaoStatus.ARCHIVED.value])
            .order_by('-criado_em')
        )
        return self._mapper.to_entity_list(list(queryset))
    
    @_persistencia
    def count(self) -> int:
        return SolicitacaoModel.objects.count()
