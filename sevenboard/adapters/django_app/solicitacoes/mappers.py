"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter SolicitacaoEntity → SolicitacaoModel (para persistência)
- Converter SolicitacaoModel → SolicitacaoEntity (para uso no Core)

O Core trabalha com datetimes ingênuos no horário local
(settings.TIME_ZONE); o banco guarda datetimes com fuso.
"""

from datetime import datetime
from typing import List, Optional

from django.conf import settings
from django.utils import timezone

from sevenboard.core.solicitacoes.entities import (
    EventoHistorico,
    SolicitacaoEntity,
    SolicitacaoStatus,
)

from .models import SolicitacaoModel


def para_banco(valor: Optional[datetime]) -> Optional[datetime]:
    """Datetime local ingênuo → aware (quando USE_TZ)."""
    if valor is None or not settings.USE_TZ or timezone.is_aware(valor):
        return valor
    return timezone.make_aware(valor)


def para_core(valor: Optional[datetime]) -> Optional[datetime]:
    """Datetime do banco → local ingênuo."""
    if valor is None or timezone.is_naive(valor):
        return valor
    return timezone.localtime(valor).replace(tzinfo=None)


class SolicitacaoMapper:
    """
    Mapper para conversão entre SolicitacaoEntity e SolicitacaoModel.
    
    Responsável por:
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - to_entity_list(): List[Model] → List[Entity]
    """
    
    @staticmethod
    def to_model(entity: SolicitacaoEntity) -> SolicitacaoModel:
        """
        Converte SolicitacaoEntity para SolicitacaoModel.
        
        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return SolicitacaoModel(
            id=entity.id,
            protocolo=entity.protocolo,
            departamento=entity.departamento,
            email=entity.email,
            tipo_solicitacao=entity.tipo_solicitacao,
            descricao=entity.descricao,
            veiculacao=list(entity.veiculacao),
            data_entrega=entity.data_entrega,
            horario_entrega=entity.horario_entrega,
            observacoes=entity.observacoes,
            arquivo_url=entity.arquivo_url,
            status=entity.status.value,
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
            iniciado_em=para_banco(entity.iniciado_em),
            concluido_em=para_banco(entity.concluido_em),
            arquivado_em=para_banco(entity.arquivado_em),
            historico=[evento.to_dict() for evento in entity.historico],
        )
    
    @staticmethod
    def to_entity(model: SolicitacaoModel) -> SolicitacaoEntity:
        """
        Converte SolicitacaoModel para SolicitacaoEntity.
        
        Note:
            Bypassa validações do factory method .criar()
            e nunca recalcula o protocolo
        """
        return SolicitacaoEntity(
            id=model.id,
            protocolo=model.protocolo,
            departamento=model.departamento,
            email=model.email or None,
            tipo_solicitacao=model.tipo_solicitacao or "",
            descricao=model.descricao,
            veiculacao=list(model.veiculacao or []),
            data_entrega=model.data_entrega,
            horario_entrega=model.horario_entrega,
            observacoes=model.observacoes or "",
            arquivo_url=model.arquivo_url,
            status=SolicitacaoStatus(model.status),
            criado_em=para_core(model.criado_em),
            atualizado_em=para_core(model.atualizado_em),
            iniciado_em=para_core(model.iniciado_em),
            concluido_em=para_core(model.concluido_em),
            arquivado_em=para_core(model.arquivado_em),
            historico=[EventoHistorico.from_dict(e) for e in (model.historico or [])],
        )
    
    @staticmethod
    def to_entity_list(models: List[SolicitacaoModel]) -> List[SolicitacaoEntity]:
        return [SolicitacaoMapper.to_entity(model) for model in models]
