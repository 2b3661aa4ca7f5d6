"""
Configuração do Django App para Solicitações.
"""

from django.apps import AppConfig


class SolicitacoesConfig(AppConfig):
    """Configuração do app Solicitações."""
    
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'sevenboard.adapters.django_app.solicitacoes'
    label = 'solicitacoes'
    verbose_name = 'Solicitações de Marketing'
