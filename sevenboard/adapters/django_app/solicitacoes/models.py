"""
Django Models para o domínio de Solicitações.

Estes models são ADAPTERS - implementam a persistência para as
entidades definidas em sevenboard/core/solicitacoes/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers
"""

from django.db import models
from django.utils import timezone

from sevenboard.core.solicitacoes.entities import SolicitacaoStatus


class SolicitacaoStatusChoices(models.TextChoices):
    """Choices para status (espelha SolicitacaoStatus do Core)."""
    TODO = 'todo', 'Pendente'
    IN_PROGRESS = 'in-progress', 'Em Progresso'
    VIDEO_MATERIAIS = 'video-materiais', 'Vídeo/Materiais'
    COBERTURA_EVENTOS = 'cobertura-eventos', 'Cobertura de Eventos'
    ARTE = 'arte', 'Arte'
    FAZENDO = 'fazendo', 'Fazendo'
    APROVACAO = 'aprovacao', 'A Aprovar'
    PARADO = 'parado', 'Parado'
    DONE = 'done', 'Concluído'
    ARCHIVED = 'archived', 'Arquivado'


class SolicitacaoModel(models.Model):
    """
    Model Django para persistência de Solicitações.
    
    Fields:
        id: UUID como primary key (gerado pela Entity)
        protocolo: Código 7BD-... (calculado na abertura)
        veiculacao: Lista de canais (JSONField)
        observacoes: Notas livres + log de eventos
        historico: Eventos tipados (JSONField)
    """
    
    # Primary Key - UUID gerado pela Entity
    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único da solicitação"
    )
    
    protocolo = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Código legível 7BD-..."
    )
    
    # Dados da abertura
    departamento = models.CharField(max_length=100, db_index=True)
    email = models.EmailField(null=True, blank=True)
    tipo_solicitacao = models.CharField(max_length=200, blank=True, default='')
    descricao = models.TextField()
    veiculacao = models.JSONField(default=list, blank=True)
    data_entrega = models.DateField(db_index=True)
    horario_entrega = models.TimeField(null=True, blank=True)
    observacoes = models.TextField(blank=True, default='')
    arquivo_url = models.CharField(max_length=500, null=True, blank=True)
    
    # Estado
    status = models.CharField(
        max_length=30,
        choices=SolicitacaoStatusChoices.choices,
        default=SolicitacaoStatusChoices.TODO,
        db_index=True,
    )
    
    # Timestamps
    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)
    iniciado_em = models.DateTimeField(null=True, blank=True)
    concluido_em = models.DateTimeField(null=True, blank=True)
    arquivado_em = models.DateTimeField(null=True, blank=True)
    
    historico = models.JSONField(
        default=list,
        blank=True,
        help_text="Eventos {ocorrido_em, tipo, payload} em ordem"
    )
    
    class Meta:
        db_table = 'solicitacao'
        verbose_name = 'Solicitação'
        verbose_name_plural = 'Solicitações'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['status', 'criado_em'], name='solicitacao_status_criado_idx'),
            models.Index(fields=['status', 'data_entrega'], name='solicitacao_status_entrega_idx'),
        ]
    
    def __str__(self):
        return f"{self.protocolo} ({self.departamento})"
    
    def __repr__(self):
        return f"<SolicitacaoModel id={self.id[:8]} status={self.status}>"
    
    @property
    def status_rotulo(self) -> str:
        return SolicitacaoStatus(self.status).rotulo
