"""
Django Models para os domínios de Tickets e Alertas.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/tickets e src/core/alerts.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Tabelas:
- TicketModel: Tickets com prazo, renovações e versão (lock otimista)
- AlertModel: Alertas; referencia o ticket apenas por ID
"""

from django.db import models
from django.utils import timezone


class TicketStatusChoices(models.TextChoices):
    """Choices para status de ticket (espelha TicketStatus do Core)."""
    ABERTO = 'Open', 'Open'
    FECHADO = 'Closed', 'Closed'
    EXPIRADO = 'Expired', 'Expired'


class AlertTypeChoices(models.TextChoices):
    EXPIRANDO = 'expiring_soon', 'Expiring soon'
    EXPIRADO = 'expired', 'Expired'
    RENOVADO = 'renewed', 'Renewed'
    FECHADO = 'closed', 'Closed'


class AlertSeverityChoices(models.TextChoices):
    BAIXA = 'low', 'Low'
    MEDIA = 'medium', 'Medium'
    ALTA = 'high', 'High'
    CRITICA = 'critical', 'Critical'


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Fields:
        id: UUID como primary key (gerado pela Entity)
        numero: Número único (TKT-2024-0001)
        organizacao: Organização solicitante
        status: Estado atual (choices)
        data_expiracao: Prazo de validade
        localizacao: Descrição do local
        coordenadas: {"latitude", "longitude"} (JSONField)
        endereco: Endereço estruturado (JSONField)
        observacoes: Notas livres
        renovacoes: Lista de {"date", "extendedBy"} (JSONField)
        atribuido_a_id: ID do contratado responsável
        criado_em / atualizado_em: Timestamps (controlados pela Entity)
        versao: Contador do lock otimista
    """

    # Primary Key - UUID gerado pela Entity
    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do ticket"
    )

    numero = models.CharField(
        max_length=50,
        unique=True,
        help_text="Número do ticket (TKT-<ano>-NNNN)"
    )

    organizacao = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Organização solicitante"
    )

    # Estado
    status = models.CharField(
        max_length=20,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.ABERTO,
        db_index=True,
        help_text="Estado atual do ticket"
    )

    data_expiracao = models.DateTimeField(
        db_index=True,
        help_text="Prazo de validade do ticket"
    )

    # Localização
    localizacao = models.CharField(
        max_length=200,
        help_text="Descrição do local"
    )

    coordenadas = models.JSONField(
        null=True,
        blank=True,
        help_text="Latitude/longitude"
    )

    endereco = models.JSONField(
        null=True,
        blank=True,
        help_text="Endereço estruturado para exibição"
    )

    observacoes = models.TextField(
        blank=True,
        default='',
        help_text="Notas livres"
    )

    renovacoes = models.JSONField(
        default=list,
        blank=True,
        help_text="Histórico de renovações"
    )

    atribuido_a_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="ID do contratado responsável"
    )

    # Timestamps
    criado_em = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de criação"
    )

    atualizado_em = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora da última atualização"
    )

    versao = models.PositiveIntegerField(
        default=1,
        help_text="Versão para controle de concorrência otimista"
    )

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['status', 'data_expiracao'], name='idx_ticket_status_expira'),
            models.Index(fields=['atribuido_a_id', 'status'], name='idx_ticket_resp_status'),
        ]

    def __str__(self):
        return f"{self.numero} ({self.status})"

    def __repr__(self):
        return f"<TicketModel id={self.id[:8]} numero={self.numero} status={self.status}>"


class AlertModel(models.Model):
    """
    Model Django para persistência de Alertas.

    `ticket_id` é uma referência fraca (sem ForeignKey); a remoção
    em cascata é feita pelo use case de exclusão de ticket.
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do alerta"
    )

    ticket_id = models.CharField(
        max_length=36,
        db_index=True,
        help_text="ID do ticket referenciado"
    )

    tipo = models.CharField(
        max_length=20,
        choices=AlertTypeChoices.choices,
        db_index=True,
        help_text="Tipo do alerta"
    )

    mensagem = models.TextField(
        help_text="Mensagem exibida ao usuário"
    )

    severidade = models.CharField(
        max_length=10,
        choices=AlertSeverityChoices.choices,
        default=AlertSeverityChoices.MEDIA,
        help_text="Severidade"
    )

    lido = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Se o alerta já foi lido"
    )

    criado_em = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de criação"
    )

    class Meta:
        db_table = 'alerts'
        verbose_name = 'Alerta'
        verbose_name_plural = 'Alertas'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['ticket_id', 'tipo', 'criado_em'], name='idx_alert_ticket_tipo_data'),
        ]

    def __str__(self):
        return f"{self.tipo} - {self.ticket_id[:8]} @ {self.criado_em}"
