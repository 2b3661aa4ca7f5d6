"""
URL Configuration para SevenBoard.

Estrutura:
- /admin/ - Django Admin (quadro administrativo)
- /api/ - API JSON de solicitações e notificações
- /uploads/ - Arquivos enviados (apenas em DEBUG)
- /health - Health check
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('sevenboard.adapters.django_app.solicitacoes.urls')),
    path('health', health, name='health'),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
