"""
Entidades do Domínio de Tickets.

Este módulo define as entidades que encapsulam as regras de negócio
de tickets de localização de rede subterrânea (locate tickets).

Entidades:
- TicketEntity: Agregado principal do domínio
- TicketStatus: Estados possíveis de um ticket
- Renovacao: Registro imutável de uma renovação

Regras de Negócio Encapsuladas:
- Validação de dados na criação
- Renovação estende a partir da expiração atual
- Transições de status controladas
- Cálculo de tempo restante até a expiração
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional
import math
import re
import uuid

from src.core.shared.clock import garantir_utc, utc_agora
from src.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)


DIAS_RENOVACAO_PADRAO = 15
DIAS_RENOVACAO_MAXIMO = 365
PREFIXO_NUMERO = "TKT"


class TicketStatus(Enum):
    """
    Estados possíveis de um ticket.

    Fluxo de Estados:
        ABERTO → EXPIRADO   (monitor de expiração)
        EXPIRADO → ABERTO   (renovação)
        ABERTO/EXPIRADO → FECHADO

        FECHADO é terminal.
    """

    ABERTO = "Open"
    FECHADO = "Closed"
    EXPIRADO = "Expired"

    @classmethod
    def from_string(cls, value: str) -> "TicketStatus":
        """
        Converte string para enum.

        Args:
            value: Valor string (nome ou valor do enum)

        Returns:
            TicketStatus correspondente

        Raises:
            ValueError: Se valor inválido
        """
        # Tenta pelo nome (ABERTO)
        try:
            return cls[value.upper()]
        except KeyError:
            pass

        # Tenta pelo valor ("Open")
        for status in cls:
            if status.value.lower() == value.lower():
                return status

        raise ValueError(f"Status inválido: {value}")


@dataclass(frozen=True)
class Renovacao:
    """Registro de renovação (append-only)."""

    data: datetime
    dias_estendidos: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.data.isoformat(),
            "extendedBy": self.dias_estendidos,
        }


def gerar_numero_ticket(ultimo_numero: Optional[str], ano: int) -> str:
    """
    Calcula o próximo número de ticket do ano.

    Formato: TKT-<ano>-NNNN. O sufixo é o inteiro após o segundo hífen
    do último número + 1, ou 1 se não houver número anterior (ou se o
    sufixo não for numérico). Largura mínima de 4 dígitos.

    Args:
        ultimo_numero: Maior número existente com prefixo TKT-<ano>- (ou None)
        ano: Ano corrente

    Returns:
        Próximo número, ex: "TKT-2024-0016"

    Example:
        >>> gerar_numero_ticket("TKT-2024-0015", 2024)
        'TKT-2024-0016'
        >>> gerar_numero_ticket(None, 2025)
        'TKT-2025-0001'
    """
    prefixo = prefixo_do_ano(ano)
    proximo = 1

    if ultimo_numero:
        partes = ultimo_numero.split("-")
        if len(partes) >= 3 and partes[2].isdigit():
            proximo = int(partes[2]) + 1

    return f"{prefixo}-{proximo:04d}"


def prefixo_do_ano(ano: int) -> str:
    return f"{PREFIXO_NUMERO}-{ano}"


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Registro de uma solicitação de localização de utilidades com
    prazo de validade. Pode ser renovado, fechado ou expirado pelo
    monitor de expiração.

    Invariantes:
    - Número do ticket é único e imutável após atribuído
    - Organização, localização e responsável são obrigatórios
    - Data de expiração deve estar no futuro na criação
    - Renovações são apenas acrescentadas, nunca removidas
    - Ticket fechado não volta a ser aberto

    Attributes:
        id: Identificador único (UUID)
        numero: Número do ticket (ticketNumber), ex: TKT-2024-0001
        organizacao: Organização solicitante
        status: Estado atual do ticket
        data_expiracao: Prazo de validade
        localizacao: Descrição textual do local
        coordenadas: {"latitude": float, "longitude": float} opcional
        endereco: Dados de endereço para exibição (cidade, estado, CEP...)
        observacoes: Notas livres
        renovacoes: Histórico de renovações
        atribuido_a_id: ID do contratado responsável
        criado_em: Data/hora de criação
        atualizado_em: Data/hora da última atualização
        versao: Contador para controle de concorrência otimista

    Example:
        ticket = TicketEntity.criar(
            numero="TKT-2024-0001",
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=10),
            atribuido_a_id="user123",
        )

        ticket.renovar(15)
        ticket.fechar()
    """

    # Identificação
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    numero: str = ""

    # Dados principais
    organizacao: str = ""
    localizacao: str = ""
    observacoes: str = ""
    coordenadas: Optional[Dict[str, float]] = None
    endereco: Optional[Dict[str, Any]] = None

    # Estado
    status: TicketStatus = field(default=TicketStatus.ABERTO)
    data_expiracao: datetime = field(default_factory=utc_agora)
    renovacoes: List[Renovacao] = field(default_factory=list)

    # Relacionamentos
    atribuido_a_id: str = ""

    # Timestamps
    criado_em: datetime = field(default_factory=utc_agora)
    atualizado_em: datetime = field(default_factory=utc_agora)

    # Concorrência otimista
    versao: int = 0

    # Constantes de validação
    NUMERO_MAX_LENGTH: ClassVar[int] = 50
    ORGANIZACAO_MAX_LENGTH: ClassVar[int] = 100
    LOCALIZACAO_MAX_LENGTH: ClassVar[int] = 200
    OBSERVACOES_MAX_LENGTH: ClassVar[int] = 1000

    @classmethod
    def criar(
        cls,
        numero: str,
        organizacao: str,
        localizacao: str,
        data_expiracao: datetime,
        atribuido_a_id: str,
        observacoes: str = "",
        coordenadas: Optional[Dict[str, float]] = None,
        endereco: Optional[Dict[str, Any]] = None,
        agora: Optional[datetime] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar ticket com validações.

        Args:
            numero: Número do ticket (normalizado: sem espaços, maiúsculo)
            organizacao: Organização solicitante
            localizacao: Descrição do local
            data_expiracao: Prazo de validade (deve estar no futuro)
            atribuido_a_id: ID do responsável já resolvido
            observacoes: Notas opcionais
            coordenadas: Latitude/longitude opcionais
            endereco: Endereço estruturado opcional
            agora: Instante de referência (default: relógio UTC)

        Returns:
            Nova instância de TicketEntity com status ABERTO

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        agora = garantir_utc(agora) if agora else utc_agora()
        data_expiracao = cls._validar_data_expiracao(data_expiracao, agora)

        numero_normalizado = cls._validar_numero(numero)
        organizacao = cls._validar_texto(organizacao, "organization", cls.ORGANIZACAO_MAX_LENGTH)
        localizacao = cls._validar_texto(localizacao, "location", cls.LOCALIZACAO_MAX_LENGTH)
        cls._validar_responsavel(atribuido_a_id)
        observacoes = cls._validar_observacoes(observacoes)
        cls._validar_coordenadas(coordenadas)

        return cls(
            numero=numero_normalizado,
            organizacao=organizacao,
            localizacao=localizacao,
            observacoes=observacoes,
            coordenadas=dict(coordenadas) if coordenadas else None,
            endereco=dict(endereco) if endereco else None,
            status=TicketStatus.ABERTO,
            data_expiracao=data_expiracao,
            atribuido_a_id=atribuido_a_id,
            criado_em=agora,
            atualizado_em=agora,
        )

    # =========================================================================
    # Validações
    # =========================================================================

    @classmethod
    def _validar_numero(cls, numero: str) -> str:
        """Valida e normaliza número do ticket."""
        if numero is not None and not isinstance(numero, str):
            raise ValidationError("Ticket number must be a string", field="ticketNumber")

        numero_limpo = (numero or "").strip().upper()

        if not numero_limpo:
            raise ValidationError("Ticket number is required", field="ticketNumber")

        if len(numero_limpo) > cls.NUMERO_MAX_LENGTH:
            raise ValidationError(
                f"Ticket number must be at most {cls.NUMERO_MAX_LENGTH} characters",
                field="ticketNumber",
            )

        if not re.fullmatch(r"[A-Z0-9-]+", numero_limpo):
            raise ValidationError(
                "Ticket number can only contain letters, numbers and hyphens",
                field="ticketNumber",
            )

        return numero_limpo

    @staticmethod
    def _validar_texto(valor: str, campo: str, max_length: int) -> str:
        if valor is not None and not isinstance(valor, str):
            raise ValidationError(f"{campo.capitalize()} must be a string", field=campo)

        valor_limpo = (valor or "").strip()

        if not valor_limpo:
            raise ValidationError(f"{campo.capitalize()} is required", field=campo)

        if len(valor_limpo) > max_length:
            raise ValidationError(
                f"{campo.capitalize()} must be at most {max_length} characters",
                field=campo,
            )

        return valor_limpo

    @classmethod
    def _validar_observacoes(cls, observacoes: Optional[str]) -> str:
        if observacoes is not None and not isinstance(observacoes, str):
            raise ValidationError("Notes must be a string", field="notes")

        observacoes_limpas = (observacoes or "").strip()
        if len(observacoes_limpas) > cls.OBSERVACOES_MAX_LENGTH:
            raise ValidationError(
                f"Notes must be at most {cls.OBSERVACOES_MAX_LENGTH} characters",
                field="notes",
            )
        return observacoes_limpas

    @staticmethod
    def _validar_responsavel(atribuido_a_id: str) -> None:
        if not atribuido_a_id:
            raise ValidationError("Assigned contractor is required", field="assignedTo")

    @staticmethod
    def _validar_data_expiracao(data_expiracao: datetime, agora: datetime) -> datetime:
        """Expiração é obrigatória e estritamente futura."""
        if data_expiracao is None:
            raise ValidationError("Expiration date is required", field="expirationDate")

        data_expiracao = garantir_utc(data_expiracao)
        if data_expiracao <= agora:
            raise ValidationError(
                "Expiration date must be in the future",
                field="expirationDate",
            )
        return data_expiracao

    @staticmethod
    def _validar_coordenadas(coordenadas: Optional[Dict[str, float]]) -> None:
        """Latitude em [-90, 90], longitude em [-180, 180]."""
        if not coordenadas:
            return

        limites = {"latitude": 90, "longitude": 180}
        for chave, limite in limites.items():
            valor = coordenadas.get(chave)
            if valor is None:
                raise ValidationError(f"Coordinates must include {chave}", field=f"coordinates.{chave}")
            try:
                valor = float(valor)
            except (TypeError, ValueError):
                raise ValidationError(f"{chave.capitalize()} must be a number", field=f"coordinates.{chave}")
            if not -limite <= valor <= limite:
                raise ValidationError(
                    f"{chave.capitalize()} must be between -{limite} and {limite}",
                    field=f"coordinates.{chave}",
                )

    # =========================================================================
    # Comportamento
    # =========================================================================

    def renovar(
        self,
        dias: int = DIAS_RENOVACAO_PADRAO,
        agora: Optional[datetime] = None,
    ) -> Renovacao:
        """
        Renova o ticket por N dias.

        Regras:
        - Estende a partir da expiração ARMAZENADA (mesmo se já passou)
        - Acrescenta um registro de renovação
        - EXPIRADO volta para ABERTO
        - Ticket fechado não pode ser renovado

        Args:
            dias: Dias a estender (1 a 365, default 15)
            agora: Instante da renovação

        Returns:
            O registro de renovação criado

        Raises:
            ValidationError: Se dias inválido
            BusinessRuleViolationError: Se ticket fechado
        """
        if isinstance(dias, bool) or not isinstance(dias, int) or not 1 <= dias <= DIAS_RENOVACAO_MAXIMO:
            raise ValidationError(
                f"Days must be an integer between 1 and {DIAS_RENOVACAO_MAXIMO}",
                field="days",
            )

        if self.status == TicketStatus.FECHADO:
            raise BusinessRuleViolationError(
                "Closed tickets cannot be renewed",
                rule="ticket_fechado_terminal",
            )

        agora = garantir_utc(agora) if agora else utc_agora()
        renovacao = Renovacao(data=agora, dias_estendidos=dias)

        self.data_expiracao = self.data_expiracao + timedelta(days=dias)
        self.renovacoes.append(renovacao)

        if self.status == TicketStatus.EXPIRADO:
            self.status = TicketStatus.ABERTO

        self._atualizar_timestamp(agora)
        return renovacao

    def fechar(self, agora: Optional[datetime] = None) -> bool:
        """
        Fecha o ticket.

        Idempotente: fechar um ticket já fechado não altera nada.

        Returns:
            True se o status mudou
        """
        if self.status == TicketStatus.FECHADO:
            return False

        self.status = TicketStatus.FECHADO
        self._atualizar_timestamp(agora)
        return True

    def expirar(self, agora: Optional[datetime] = None) -> None:
        """
        Marca o ticket como expirado (usado pelo monitor).

        Raises:
            BusinessRuleViolationError: Se ticket não está ABERTO
        """
        if self.status != TicketStatus.ABERTO:
            raise BusinessRuleViolationError(
                f"Only open tickets can expire (current: {self.status.value})",
                rule="apenas_aberto_expira",
            )

        self.status = TicketStatus.EXPIRADO
        self._atualizar_timestamp(agora)

    def alterar_status(self, novo_status: TicketStatus, agora: Optional[datetime] = None) -> None:
        """
        Altera status do ticket com validação de transição.

        Transições válidas:
        - ABERTO → FECHADO, EXPIRADO
        - EXPIRADO → ABERTO, FECHADO
        - FECHADO → (nenhuma)

        Mesmo status é no-op.

        Raises:
            BusinessRuleViolationError: Se transição inválida
        """
        if novo_status == self.status:
            return

        transicoes_validas = {
            TicketStatus.ABERTO: [TicketStatus.FECHADO, TicketStatus.EXPIRADO],
            TicketStatus.EXPIRADO: [TicketStatus.ABERTO, TicketStatus.FECHADO],
            TicketStatus.FECHADO: [],
        }

        if novo_status not in transicoes_validas[self.status]:
            raise BusinessRuleViolationError(
                f"Transition from {self.status.value} to {novo_status.value} is not allowed",
                rule="transicao_status_invalida",
            )

        self.status = novo_status
        self._atualizar_timestamp(agora)

    def atualizar_dados(
        self,
        organizacao: Optional[str] = None,
        localizacao: Optional[str] = None,
        observacoes: Optional[str] = None,
        data_expiracao: Optional[datetime] = None,
        coordenadas: Optional[Dict[str, float]] = None,
        endereco: Optional[Dict[str, Any]] = None,
        agora: Optional[datetime] = None,
    ) -> List[str]:
        """
        Atualiza campos editáveis. Apenas valores não-None são aplicados.

        O número do ticket não é editável.

        Returns:
            Lista de campos alterados
        """
        alterados = []

        if organizacao is not None:
            self.organizacao = self._validar_texto(organizacao, "organization", self.ORGANIZACAO_MAX_LENGTH)
            alterados.append("organization")

        if localizacao is not None:
            self.localizacao = self._validar_texto(localizacao, "location", self.LOCALIZACAO_MAX_LENGTH)
            alterados.append("location")

        if observacoes is not None:
            self.observacoes = self._validar_observacoes(observacoes)
            alterados.append("notes")

        if data_expiracao is not None:
            self.data_expiracao = garantir_utc(data_expiracao)
            alterados.append("expirationDate")

        if coordenadas is not None:
            self._validar_coordenadas(coordenadas)
            self.coordenadas = dict(coordenadas) or None
            alterados.append("coordinates")

        if endereco is not None:
            self.endereco = dict(endereco) or None
            alterados.append("addressData")

        if alterados:
            self._atualizar_timestamp(agora)

        return alterados

    def reatribuir(self, responsavel_id: str, agora: Optional[datetime] = None) -> None:
        self._validar_responsavel(responsavel_id)
        if responsavel_id != self.atribuido_a_id:
            self.atribuido_a_id = responsavel_id
            self._atualizar_timestamp(agora)

    def _atualizar_timestamp(self, agora: Optional[datetime] = None) -> None:
        """Atualiza timestamp de modificação."""
        self.atualizado_em = garantir_utc(agora) if agora else utc_agora()

    # =========================================================================
    # Propriedades derivadas
    # =========================================================================

    def esta_expirado(self, agora: Optional[datetime] = None) -> bool:
        """Status EXPIRADO ou prazo já passou."""
        agora = garantir_utc(agora) if agora else utc_agora()
        return self.status == TicketStatus.EXPIRADO or agora > self.data_expiracao

    def horas_ate_expiracao(self, agora: Optional[datetime] = None) -> float:
        """Horas (fracionárias) até o prazo. Negativo se já passou."""
        agora = garantir_utc(agora) if agora else utc_agora()
        return (self.data_expiracao - agora) / timedelta(hours=1)

    def dias_ate_expiracao(self, agora: Optional[datetime] = None) -> int:
        """
        Dias até a expiração, arredondados para cima.

        Returns:
            0 se EXPIRADO ou prazo vencido
        """
        if self.status == TicketStatus.EXPIRADO:
            return 0
        agora = garantir_utc(agora) if agora else utc_agora()
        dias = math.ceil((self.data_expiracao - agora) / timedelta(days=1))
        return max(0, dias)

    @property
    def esta_aberto(self) -> bool:
        return self.status == TicketStatus.ABERTO

    @property
    def esta_fechado(self) -> bool:
        return self.status == TicketStatus.FECHADO

    def __repr__(self) -> str:
        """Representação string para debugging."""
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"numero={self.numero}, "
            f"status={self.status.value}, "
            f"expira={self.data_expiracao.isoformat()}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash baseado em ID."""
        return hash(self.id)
