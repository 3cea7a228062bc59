"""
URL Configuration do Utility Ticket Tracker.

Estrutura:
- /admin/ - Django Admin
- /api/ - API JSON de tickets, alertas e monitor de expiração
- /health/ - Health check
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('src.adapters.django_app.tickets.urls')),
    path('health/', health, name='health'),
]
