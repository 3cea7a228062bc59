"""
Migration inicial para os domínios de Tickets e Alertas.

Cria as tabelas:
- tickets: Tickets com prazo e renovações
- alerts: Alertas derivados do ciclo de vida dos tickets
"""

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: tickets
        # =================================================================
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do ticket'
                )),
                ('numero', models.CharField(
                    max_length=50,
                    unique=True,
                    help_text='Número do ticket (TKT-<ano>-NNNN)'
                )),
                ('organizacao', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Organização solicitante'
                )),
                ('status', models.CharField(
                    max_length=20,
                    choices=[
                        ('Open', 'Open'),
                        ('Closed', 'Closed'),
                        ('Expired', 'Expired'),
                    ],
                    default='Open',
                    db_index=True,
                    help_text='Estado atual do ticket'
                )),
                ('data_expiracao', models.DateTimeField(
                    db_index=True,
                    help_text='Prazo de validade do ticket'
                )),
                ('localizacao', models.CharField(
                    max_length=200,
                    help_text='Descrição do local'
                )),
                ('coordenadas', models.JSONField(
                    null=True,
                    blank=True,
                    help_text='Latitude/longitude'
                )),
                ('endereco', models.JSONField(
                    null=True,
                    blank=True,
                    help_text='Endereço estruturado para exibição'
                )),
                ('observacoes', models.TextField(
                    blank=True,
                    default='',
                    help_text='Notas livres'
                )),
                ('renovacoes', models.JSONField(
                    default=list,
                    blank=True,
                    help_text='Histórico de renovações'
                )),
                ('atribuido_a_id', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='ID do contratado responsável'
                )),
                ('criado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True,
                    help_text='Data/hora de criação'
                )),
                ('atualizado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Data/hora da última atualização'
                )),
                ('versao', models.PositiveIntegerField(
                    default=1,
                    help_text='Versão para controle de concorrência otimista'
                )),
            ],
            options={
                'db_table': 'tickets',
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(
                fields=['status', 'data_expiracao'],
                name='idx_ticket_status_expira'
            ),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(
                fields=['atribuido_a_id', 'status'],
                name='idx_ticket_resp_status'
            ),
        ),

        # =================================================================
        # Tabela: alerts
        # =================================================================
        migrations.CreateModel(
            name='AlertModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do alerta'
                )),
                ('ticket_id', models.CharField(
                    max_length=36,
                    db_index=True,
                    help_text='ID do ticket referenciado'
                )),
                ('tipo', models.CharField(
                    max_length=20,
                    choices=[
                        ('expiring_soon', 'Expiring soon'),
                        ('expired', 'Expired'),
                        ('renewed', 'Renewed'),
                        ('closed', 'Closed'),
                    ],
                    db_index=True,
                    help_text='Tipo do alerta'
                )),
                ('mensagem', models.TextField(
                    help_text='Mensagem exibida ao usuário'
                )),
                ('severidade', models.CharField(
                    max_length=10,
                    choices=[
                        ('low', 'Low'),
                        ('medium', 'Medium'),
                        ('high', 'High'),
                        ('critical', 'Critical'),
                    ],
                    default='medium',
                    help_text='Severidade'
                )),
                ('lido', models.BooleanField(
                    default=False,
                    db_index=True,
                    help_text='Se o alerta já foi lido'
                )),
                ('criado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True,
                    help_text='Data/hora de criação'
                )),
            ],
            options={
                'db_table': 'alerts',
                'verbose_name': 'Alerta',
                'verbose_name_plural': 'Alertas',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='alertmodel',
            index=models.Index(
                fields=['ticket_id', 'tipo', 'criado_em'],
                name='idx_alert_ticket_tipo_data'
            ),
        ),
    ]
