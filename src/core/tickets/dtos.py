"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento de entidades para camadas externas.

Tipos de DTOs:
- Input DTOs: Recebem dados de entrada (de APIs)
- Output DTOs: Formatam dados para resposta (chaves no formato da API)
- Query DTOs: Filtros, ordenação e paginação de listagens
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from src.core.shared.exceptions import ValidationError

from .entities import TicketEntity, TicketStatus


T = TypeVar("T")

POR_PAGINA_PADRAO = 25
POR_PAGINA_MAXIMO = 100


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Attributes:
        organizacao: Organização solicitante
        localizacao: Descrição do local
        data_expiracao: Prazo de validade
        numero: Número do ticket (None = gerar automaticamente)
        atribuido_a_id: Responsável solicitado (ignorado para contratados)
        observacoes: Notas livres
        coordenadas: Latitude/longitude
        endereco: Endereço estruturado para exibição
    """

    organizacao: str
    localizacao: str
    data_expiracao: datetime
    numero: Optional[str] = None
    atribuido_a_id: Optional[str] = None
    observacoes: str = ""
    coordenadas: Optional[Dict[str, float]] = None
    endereco: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class AtualizarTicketInputDTO:
    """
    DTO de entrada para atualizar ticket.

    Campos None não são alterados. O número do ticket não é editável.
    """

    organizacao: Optional[str] = None
    localizacao: Optional[str] = None
    observacoes: Optional[str] = None
    data_expiracao: Optional[datetime] = None
    coordenadas: Optional[Dict[str, float]] = None
    endereco: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
    atribuido_a_id: Optional[str] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída completo com dados do ticket.

    `to_dict()` usa os nomes de campos expostos pela API
    (ticketNumber, expirationDate, assignedTo, ...).
    """

    id: str
    numero: str
    organizacao: str
    status: str
    data_expiracao: datetime
    localizacao: str
    coordenadas: Optional[Dict[str, float]]
    endereco: Optional[Dict[str, Any]]
    observacoes: str
    renovacoes: List[Dict[str, Any]]
    atribuido_a_id: str
    criado_em: datetime
    atualizado_em: datetime
    esta_expirado: bool
    dias_ate_expiracao: int

    @classmethod
    def from_entity(cls, entity: TicketEntity, agora: Optional[datetime] = None) -> "TicketOutputDTO":
        """
        Factory method para converter entidade em DTO.

        Args:
            entity: Entidade TicketEntity
            agora: Instante de referência para os campos derivados
        """
        return cls(
            id=entity.id,
            numero=entity.numero,
            organizacao=entity.organizacao,
            status=entity.status.value,
            data_expiracao=entity.data_expiracao,
            localizacao=entity.localizacao,
            coordenadas=dict(entity.coordenadas) if entity.coordenadas else None,
            endereco=dict(entity.endereco) if entity.endereco else None,
            observacoes=entity.observacoes,
            renovacoes=[r.to_dict() for r in entity.renovacoes],
            atribuido_a_id=entity.atribuido_a_id,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            esta_expirado=entity.esta_expirado(agora),
            dias_ate_expiracao=entity.dias_ate_expiracao(agora),
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "ticketNumber": self.numero,
            "organization": self.organizacao,
            "status": self.status,
            "expirationDate": self.data_expiracao.isoformat(),
            "location": self.localizacao,
            "coordinates": self.coordenadas,
            "addressData": self.endereco,
            "notes": self.observacoes,
            "renewals": self.renovacoes,
            "assignedTo": self.atribuido_a_id,
            "createdAt": self.criado_em.isoformat(),
            "updatedAt": self.atualizado_em.isoformat(),
            "isExpired": self.esta_expirado,
            "daysUntilExpiration": self.dias_ate_expiracao,
        }


@dataclass
class EstatisticasTicketsDTO:
    """Contagens do painel de tickets."""

    total: int = 0
    abertos: int = 0
    fechados: int = 0
    expirados: int = 0
    expirando_em_breve: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "open": self.abertos,
            "closed": self.fechados,
            "expired": self.expirados,
            "expiringSoon": self.expirando_em_breve,
        }


@dataclass
class NumeroTicketDTO:
    """Resultado de geração/verificação de número."""

    numero: str
    disponivel: bool = True

    def to_dict(self) -> dict:
        return {
            "ticketNumber": self.numero,
            "exists": not self.disponivel,
            "available": self.disponivel,
        }


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

# Nome aceito na API → campo canônico de ordenação
CAMPOS_ORDENACAO = {
    "createdAt": "criado_em",
    "created_at": "criado_em",
    "expirationDate": "data_expiracao",
    "expiration_date": "data_expiracao",
    "ticketNumber": "numero",
    "ticket_number": "numero",
    "status": "status",
}


@dataclass(frozen=True)
class ListarTicketsQueryDTO:
    """
    DTO para parâmetros de busca/filtro de tickets.

    Attributes:
        status: Filtrar por status exato (Open/Closed/Expired)
        organizacao: Substring da organização (case-insensitive)
        numero: Substring do número do ticket (case-insensitive)
        atribuido_a_id: Filtrar por responsável
        ordenar_por: Campo de ordenação (nome da API ou alias snake_case)
        ordem: "asc" ou "desc"
        pagina: Número da página (1-indexed)
        por_pagina: Itens por página (máximo 100)
    """

    status: Optional[str] = None
    organizacao: Optional[str] = None
    numero: Optional[str] = None
    atribuido_a_id: Optional[str] = None
    ordenar_por: str = "createdAt"
    ordem: str = "desc"
    pagina: int = 1
    por_pagina: int = POR_PAGINA_PADRAO

    def normalizar(self) -> "ListarTicketsQueryDTO":
        """
        Valida e normaliza a query.

        - ordenar_por vira o campo canônico (criado_em, data_expiracao, numero, status)
        - status vira o valor do enum
        - página mínima 1, por_pagina entre 1 e 100

        Raises:
            ValidationError: Se campo de ordenação, direção ou status inválido
        """
        campo = CAMPOS_ORDENACAO.get(self.ordenar_por)
        if campo is None:
            if self.ordenar_por in CAMPOS_ORDENACAO.values():
                campo = self.ordenar_por
            else:
                raise ValidationError(
                    f"Invalid sort field: {self.ordenar_por}",
                    field="sortBy",
                )

        ordem = (self.ordem or "desc").lower()
        if ordem not in ("asc", "desc"):
            raise ValidationError(f"Invalid sort order: {self.ordem}", field="sortOrder")

        status = self.status
        if status:
            try:
                status = TicketStatus.from_string(status).value
            except ValueError as e:
                raise ValidationError(str(e), field="status") from e

        return replace(
            self,
            status=status or None,
            organizacao=(self.organizacao or "").strip() or None,
            numero=(self.numero or "").strip() or None,
            ordenar_por=campo,
            ordem=ordem,
            pagina=max(1, self.pagina),
            por_pagina=min(max(1, self.por_pagina), POR_PAGINA_MAXIMO),
        )

    @property
    def offset(self) -> int:
        return (self.pagina - 1) * self.por_pagina


@dataclass
class PaginatedResultDTO(Generic[T]):
    """
    DTO para resultados paginados.

    Attributes:
        items: Lista de itens da página atual
        total: Total de itens (sem paginação)
        pagina: Página atual
        por_pagina: Itens por página
    """

    items: List[T]
    total: int
    pagina: int
    por_pagina: int

    @property
    def total_paginas(self) -> int:
        """Calcula total de páginas."""
        if self.por_pagina <= 0:
            return 0
        return (self.total + self.por_pagina - 1) // self.por_pagina

    @property
    def tem_proxima(self) -> bool:
        return self.pagina < self.total_paginas

    @property
    def tem_anterior(self) -> bool:
        return self.pagina > 1

    def pagination_dict(self) -> dict:
        return {
            "current": self.pagina,
            "pages": self.total_paginas,
            "total": self.total,
            "limit": self.por_pagina,
            "hasNext": self.tem_proxima,
            "hasPrevious": self.tem_anterior,
        }

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "pagination": self.pagination_dict(),
        }
