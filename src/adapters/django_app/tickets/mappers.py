"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- TicketEntity ⇄ TicketModel
- AlertEntity ⇄ AlertModel

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from datetime import datetime
from typing import List

from django.utils.dateparse import parse_datetime

from src.core.alerts.entities import AlertEntity, AlertSeverity, AlertType
from src.core.shared.clock import garantir_utc
from src.core.tickets.entities import Renovacao, TicketEntity, TicketStatus

from .models import AlertModel, TicketModel


def _para_datetime(valor) -> datetime:
    if isinstance(valor, datetime):
        return garantir_utc(valor)
    return garantir_utc(parse_datetime(valor))


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    Renovações são gravadas como lista JSON no formato exposto
    pela API: [{"date": iso, "extendedBy": dias}, ...].
    """

    @staticmethod
    def to_model(entity: TicketEntity) -> TicketModel:
        """
        Converte TicketEntity para TicketModel.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        model = TicketModel(id=entity.id)
        TicketMapper.update_model(model, entity)
        model.numero = entity.numero
        model.criado_em = entity.criado_em
        model.versao = entity.versao
        return model

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na criação original
        """
        return TicketEntity(
            id=model.id,
            numero=model.numero,
            organizacao=model.organizacao,
            status=TicketStatus(model.status),
            data_expiracao=garantir_utc(model.data_expiracao),
            localizacao=model.localizacao,
            coordenadas=dict(model.coordenadas) if model.coordenadas else None,
            endereco=dict(model.endereco) if model.endereco else None,
            observacoes=model.observacoes or "",
            renovacoes=[
                Renovacao(data=_para_datetime(r["date"]), dias_estendidos=int(r["extendedBy"]))
                for r in (model.renovacoes or [])
            ],
            atribuido_a_id=model.atribuido_a_id,
            criado_em=garantir_utc(model.criado_em),
            atualizado_em=garantir_utc(model.atualizado_em),
            versao=model.versao,
        )

    @staticmethod
    def to_entity_list(models: List[TicketModel]) -> List[TicketEntity]:
        return [TicketMapper.to_entity(model) for model in models]

    @staticmethod
    def update_model(model: TicketModel, entity: TicketEntity) -> TicketModel:
        """
        Copia os campos mutáveis da Entity para o Model.

        Número, criado_em e versão não são alterados aqui.
        """
        for campo, valor in TicketMapper.campos_atualizaveis(entity).items():
            setattr(model, campo, valor)
        return model

    @staticmethod
    def campos_atualizaveis(entity: TicketEntity) -> dict:
        """Dict de campos para QuerySet.update() no save com versão."""
        return {
            "organizacao": entity.organizacao,
            "status": entity.status.value,
            "data_expiracao": entity.data_expiracao,
            "localizacao": entity.localizacao,
            "coordenadas": entity.coordenadas,
            "endereco": entity.endereco,
            "observacoes": entity.observacoes,
            "renovacoes": [r.to_dict() for r in entity.renovacoes],
            "atribuido_a_id": entity.atribuido_a_id,
            "atualizado_em": entity.atualizado_em,
        }


class AlertMapper:
    """Mapper para conversão entre AlertEntity e AlertModel."""

    @staticmethod
    def to_model(entity: AlertEntity) -> AlertModel:
        return AlertModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            tipo=entity.tipo.value,
            mensagem=entity.mensagem,
            severidade=entity.severidade.value,
            lido=entity.lido,
            criado_em=entity.criado_em,
        )

    @staticmethod
    def to_entity(model: AlertModel) -> AlertEntity:
        return AlertEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            tipo=AlertType(model.tipo),
            mensagem=model.mensagem,
            severidade=AlertSeverity(model.severidade),
            lido=model.lido,
            criado_em=garantir_utc(model.criado_em),
        )
