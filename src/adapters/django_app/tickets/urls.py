"""
URL patterns da API JSON de Tickets e Alertas.

Montadas em /api/ por src/config/urls.py. Rotas fixas
(stats/, generate-number/, ...) vêm antes de <pk> para não conflitar.
"""

from django.urls import path

from . import api_views

app_name = 'tickets'

urlpatterns = [
    # =========================================================================
    # Tickets
    # =========================================================================

    path('tickets/', api_views.TicketAPIListView.as_view(), name='ticket_list'),
    path('tickets/stats/', api_views.TicketAPIEstatisticasView.as_view(), name='ticket_stats'),
    path(
        'tickets/generate-number/',
        api_views.TicketAPIGerarNumeroView.as_view(),
        name='ticket_generate_number',
    ),
    path(
        'tickets/check-number/<str:numero>/',
        api_views.TicketAPIVerificarNumeroView.as_view(),
        name='ticket_check_number',
    ),
    path('tickets/<str:pk>/', api_views.TicketAPIDetailView.as_view(), name='ticket_detail'),
    path('tickets/<str:pk>/renew/', api_views.TicketAPIRenovarView.as_view(), name='ticket_renew'),
    path('tickets/<str:pk>/close/', api_views.TicketAPIFecharView.as_view(), name='ticket_close'),

    # =========================================================================
    # Alertas
    # =========================================================================

    path('alerts/', api_views.AlertAPIListView.as_view(), name='alert_list'),
    path('alerts/stats/', api_views.AlertAPIEstatisticasView.as_view(), name='alert_stats'),
    path(
        'alerts/mark-all-read/',
        api_views.AlertAPIMarcarTodosView.as_view(),
        name='alert_mark_all_read',
    ),
    path('alerts/<str:pk>/', api_views.AlertAPIDetailView.as_view(), name='alert_detail'),

    # =========================================================================
    # Monitor de expiração
    # =========================================================================

    path('monitor/', api_views.MonitorAPIView.as_view(), name='monitor_status'),
    path('monitor/run/', api_views.MonitorAPIView.as_view(), name='monitor_run'),
]
