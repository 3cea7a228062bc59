"""
Django Admin para Tickets e Alertas.

Edição direta pelo admin não passa pelos use cases: campos de
controle (número, versão, renovações) ficam somente leitura.
"""

from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import AlertModel, TicketModel


def _badge(cor: str, texto: str):
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 8px; '
        'border-radius: 3px; font-size: 11px;">{}</span>',
        cor,
        texto
    )


def _colorido(cor: str, texto: str):
    return format_html('<span style="color: {};">{}</span>', cor, texto)


@admin.register(TicketModel)
class TicketAdmin(admin.ModelAdmin):
    """Admin para TicketModel."""

    list_display = [
        'numero',
        'organizacao',
        'status_badge',
        'data_expiracao',
        'prazo',
        'atribuido_a_id',
        'criado_em',
    ]

    list_filter = [
        'status',
        'data_expiracao',
        'criado_em',
    ]

    search_fields = [
        'numero',
        'organizacao',
        'localizacao',
        'atribuido_a_id',
    ]

    readonly_fields = [
        'id',
        'numero',
        'renovacoes',
        'versao',
        'criado_em',
        'atualizado_em',
    ]

    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'numero', 'organizacao', 'atribuido_a_id'],
        }),
        ('Prazo', {
            'fields': ['status', 'data_expiracao', 'renovacoes'],
        }),
        ('Local', {
            'fields': ['localizacao', 'coordenadas', 'endereco', 'observacoes'],
        }),
        ('Controle', {
            'fields': ['versao', 'criado_em', 'atualizado_em'],
            'classes': ['collapse'],
        }),
    ]

    ordering = ['-criado_em']

    date_hierarchy = 'criado_em'

    @admin.display(description='Status')
    def status_badge(self, obj):
        cores = {
            'Open': '#17a2b8',
            'Expired': '#dc3545',
            'Closed': '#343a40',
        }
        return _badge(cores.get(obj.status, '#6c757d'), obj.status)

    @admin.display(description='Prazo')
    def prazo(self, obj):
        if obj.status != 'Open':
            return '-'

        restante = obj.data_expiracao - timezone.now()
        if restante.total_seconds() <= 0:
            return _colorido('#dc3545', 'Vencido')
        if restante.total_seconds() <= 48 * 3600:
            return _colorido('#fd7e14', 'Expira em breve')
        return _colorido('#28a745', 'No prazo')


@admin.register(AlertModel)
class AlertAdmin(admin.ModelAdmin):
    """Admin para AlertModel."""

    list_display = [
        'criado_em',
        'ticket_id_curto',
        'tipo',
        'severidade_badge',
        'lido',
        'mensagem',
    ]

    list_filter = [
        'tipo',
        'severidade',
        'lido',
        'criado_em',
    ]

    search_fields = [
        'ticket_id',
        'mensagem',
    ]

    readonly_fields = [
        'id',
        'ticket_id',
        'tipo',
        'mensagem',
        'severidade',
        'criado_em',
    ]

    ordering = ['-criado_em']

    @admin.display(description='Ticket')
    def ticket_id_curto(self, obj):
        return obj.ticket_id[:8] + '...'

    @admin.display(description='Severidade')
    def severidade_badge(self, obj):
        cores = {
            'low': '#28a745',
            'medium': '#ffc107',
            'high': '#fd7e14',
            'critical': '#dc3545',
        }
        return _badge(cores.get(obj.severidade, '#6c757d'), obj.severidade)
