"""
URL patterns da API de Solicitações (montadas em /api/).

- cards, cards/<id>, cards/<id>/status, cards/<id>/timeline
- catalogo
- notificacoes, notificacoes/<id>/lida, notificacoes/lidas
"""

from django.urls import path

from . import api_views

app_name = 'solicitacoes'

urlpatterns = [
    path('cards', api_views.CardsAPIView.as_view(), name='cards'),
    path('cards/<str:pk>', api_views.CardDetailAPIView.as_view(), name='card_detail'),
    path('cards/<str:pk>/status', api_views.CardStatusAPIView.as_view(), name='card_status'),
    path('cards/<str:pk>/timeline', api_views.CardTimelineAPIView.as_view(), name='card_timeline'),
    
    path('catalogo', api_views.CatalogoAPIView.as_view(), name='catalogo'),
    
    path('notificacoes', api_views.NotificacoesAPIView.as_view(), name='notificacoes'),
    # "lidas" antes do padrão com <id>
    path('notificacoes/lidas', api_views.NotificacoesLidasAPIView.as_view(), name='notificacoes_lidas'),
    path(
        'notificacoes/<str:notificacao_id>/lida',
        api_views.NotificacaoLidaAPIView.as_view(),
        name='notificacao_lida',
    ),
]
