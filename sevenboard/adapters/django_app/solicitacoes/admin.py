"""
Django Admin para o domínio de Solicitações.

Consulta e correção de dados de abertura. Status, protocolo e
carimbos de data são somente leitura: mudanças de coluna passam
pela API para manter histórico e notificações.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import SolicitacaoModel


@admin.register(SolicitacaoModel)
class SolicitacaoAdmin(admin.ModelAdmin):
    """Admin para SolicitacaoModel."""
    
    list_display = [
        'protocolo',
        'departamento',
        'tipo_solicitacao',
        'status_badge',
        'data_entrega',
        'criado_em',
    ]
    
    list_filter = [
        'status',
        'departamento',
        'data_entrega',
    ]
    
    search_fields = [
        'id',
        'protocolo',
        'descricao',
        'email',
    ]
    
    readonly_fields = [
        'id',
        'protocolo',
        'status',
        'criado_em',
        'atualizado_em',
        'iniciado_em',
        'concluido_em',
        'arquivado_em',
        'historico',
    ]
    
    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'protocolo', 'departamento', 'email'],
        }),
        ('Pedido', {
            'fields': [
                'tipo_solicitacao', 'descricao', 'veiculacao',
                'data_entrega', 'horario_entrega', 'observacoes', 'arquivo_url',
            ],
        }),
        ('Status', {
            'fields': ['status', 'iniciado_em', 'concluido_em', 'arquivado_em'],
        }),
        ('Histórico', {
            'fields': ['criado_em', 'atualizado_em', 'historico'],
            'classes': ['collapse'],
        }),
    ]
    
    ordering = ['-criado_em']
    
    date_hierarchy = 'criado_em'
    
    def status_badge(self, obj):
        """Exibe status com badge colorido."""
        colors = {
            'todo': '#17a2b8',
            'parado': '#dc3545',
            'aprovacao': '#6f42c1',
            'done': '#28a745',
            'archived': '#343a40',
        }
        color = colors.get(obj.status, '#ffc107')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color,
            obj.status_rotulo
        )
    status_badge.short_description = 'Status'
