"""
API Views JSON para Tickets e Alertas.

Endpoints (montados sob /api/):
- GET/POST         tickets/                     listar / criar
- GET              tickets/stats/               estatísticas
- GET              tickets/generate-number/     próximo número sugerido
- GET              tickets/check-number/<num>/  disponibilidade do número
- GET/PATCH/DELETE tickets/<id>/                obter / atualizar / excluir
- POST             tickets/<id>/renew/          renovar
- POST             tickets/<id>/close/          fechar
- GET              alerts/                      listar
- GET              alerts/stats/                estatísticas
- PATCH            alerts/mark-all-read/        marcar todos como lidos
- GET/PATCH/DELETE alerts/<id>/                 obter / marcar lido / excluir
- GET              monitor/                     estado do monitor de expiração
- POST             monitor/run/                 verificação manual (admin)

Formato:
- Entrada: JSON (chaves camelCase)
- Saída: JSON com estrutura {success, data/error, meta}

Autenticação:
- Session do Django; `is_staff` define o papel Admin
"""

import json
import logging
from datetime import datetime, time, timezone
from typing import Any, Dict, Optional

from django.http import HttpRequest, JsonResponse
from django.utils.dateparse import parse_date, parse_datetime
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.adapters.django_app.shared.scheduler_hooks import ultima_verificacao
from src.config.container import get_container
from src.core.alerts.dtos import ListarAlertasQueryDTO
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConcurrencyError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ForbiddenError,
    InvalidAssigneeError,
    StoreError,
    ValidationError,
)
from src.core.tickets.dtos import (
    AtualizarTicketInputDTO,
    CriarTicketInputDTO,
    ListarTicketsQueryDTO,
)
from src.core.users.entities import UsuarioAtual
from src.core.users.policies import exigir_admin

from .repositories import papel_do_usuario

logger = logging.getLogger(__name__)


class NaoAutenticadoError(Exception):
    """Request sem usuário autenticado."""


# Status HTTP por tipo de erro de domínio (subclasses antes das bases)
STATUS_POR_ERRO = (
    (ValidationError, 400),
    (InvalidAssigneeError, 400),
    (EntityNotFoundError, 404),
    (ForbiddenError, 403),
    (ConflictError, 409),
    (ConcurrencyError, 409),
    (BusinessRuleViolationError, 422),
    (StoreError, 503),
)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais

    Returns:
        JsonResponse formatada
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}")

    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object")
    return data


def usuario_atual(request: HttpRequest) -> UsuarioAtual:
    """
    Contexto do usuário autenticado.

    Raises:
        NaoAutenticadoError: Se request anônimo
    """
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        raise NaoAutenticadoError("Authentication required")

    return UsuarioAtual(
        id=str(user.pk),
        role=papel_do_usuario(user),
        email=user.email or None,
    )


def parse_expiration(valor: Any) -> Optional[datetime]:
    """
    Converte expirationDate (ISO 8601 ou YYYY-MM-DD) para datetime UTC.

    Datas sem horário valem a partir da meia-noite UTC.

    Raises:
        ValidationError: Se formato inválido
    """
    if valor in (None, ''):
        return None
    if not isinstance(valor, str):
        raise ValidationError("Invalid expiration date", field="expirationDate")

    try:
        data_hora = parse_datetime(valor)
        if data_hora is None:
            data = parse_date(valor)
            if data is None:
                raise ValueError(valor)
            data_hora = datetime.combine(data, time.min, tzinfo=timezone.utc)
    except ValueError as e:
        raise ValidationError("Invalid expiration date", field="expirationDate") from e

    if data_hora.tzinfo is None:
        data_hora = data_hora.replace(tzinfo=timezone.utc)
    return data_hora


def int_param(request: HttpRequest, nome: str, padrao: int) -> int:
    valor = request.GET.get(nome)
    if valor in (None, ''):
        return padrao
    try:
        return int(valor)
    except ValueError:
        raise ValidationError(f"{nome} must be an integer", field=nome)


def bool_param(request: HttpRequest, nome: str) -> bool:
    return (request.GET.get(nome) or '').lower() in ('true', '1', 'yes')


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def dispatch(self, request: HttpRequest, *args, **kwargs) -> JsonResponse:
        try:
            return super().dispatch(request, *args, **kwargs)
        except Exception as e:
            return self.handle_exception(e)

    def http_method_not_allowed(self, request, *args, **kwargs):
        return json_response(
            success=False,
            error=f"Method {request.method} not allowed",
            status=405,
        )

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        Args:
            e: Exceção capturada

        Returns:
            JsonResponse com erro
        """
        if isinstance(e, NaoAutenticadoError):
            return json_response(success=False, error=str(e), status=401)

        if isinstance(e, DomainException):
            status = next(
                (codigo for tipo, codigo in STATUS_POR_ERRO if isinstance(e, tipo)),
                400,
            )
            if status >= 500:
                logger.error(f"Falha de armazenamento na API: {e}")
            meta = e.to_dict()
            meta.pop('message', None)
            meta['code'] = meta.pop('error')
            return json_response(success=False, error=e.message, status=status, meta=meta)

        if isinstance(e, ValueError):
            return json_response(success=False, error=str(e), status=400)

        # Erro inesperado
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Internal server error",
            status=500
        )


# =============================================================================
# Ticket API Views
# =============================================================================

class TicketAPIListView(BaseAPIView):
    """
    GET /api/tickets/ - Lista tickets
    POST /api/tickets/ - Cria ticket
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Lista tickets com filtros, ordenação e paginação.

        Query params:
        - status, organization, ticketNumber, assignedTo
        - sortBy (createdAt|expirationDate|ticketNumber|status), sortOrder (asc|desc)
        - page (default 1), limit (default 25, máx 100)

        Contratados sempre recebem apenas os próprios tickets.
        """
        usuario = usuario_atual(request)

        query = ListarTicketsQueryDTO(
            status=request.GET.get('status') or None,
            organizacao=request.GET.get('organization') or None,
            numero=request.GET.get('ticketNumber') or None,
            atribuido_a_id=request.GET.get('assignedTo') or None,
            ordenar_por=request.GET.get('sortBy') or 'createdAt',
            ordem=request.GET.get('sortOrder') or 'desc',
            pagina=int_param(request, 'page', 1),
            por_pagina=int_param(request, 'limit', ListarTicketsQueryDTO.por_pagina),
        )

        resultado = self.get_service('listar_tickets_service').execute(query, usuario)

        return json_response(
            success=True,
            data=[t.to_dict() for t in resultado.items],
            meta={'pagination': resultado.pagination_dict()},
        )

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Cria novo ticket.

        Body JSON:
        {
            "organization": "string (obrigatório)",
            "location": "string (obrigatório)",
            "expirationDate": "ISO 8601 (obrigatório, futuro)",
            "ticketNumber": "string (opcional, gerado se ausente)",
            "assignedTo": "user id (opcional, apenas admin)",
            "notes": "string", "coordinates": {...}, "addressData": {...}
        }
        """
        usuario = usuario_atual(request)
        data = self.parse_body(request)

        input_dto = CriarTicketInputDTO(
            organizacao=data.get('organization', ''),
            localizacao=data.get('location', ''),
            data_expiracao=parse_expiration(data.get('expirationDate')),
            numero=data.get('ticketNumber') or None,
            atribuido_a_id=data.get('assignedTo') or None,
            observacoes=data.get('notes') or '',
            coordenadas=data.get('coordinates') or None,
            endereco=data.get('addressData') or None,
        )

        output = self.get_service('criar_ticket_service').execute(input_dto, usuario)

        logger.info(f"API: Ticket criado: {output.numero} por {usuario}")

        return json_response(success=True, data=output.to_dict(), status=201)


class TicketAPIDetailView(BaseAPIView):
    """
    GET /api/tickets/<id>/ - Obter ticket
    PATCH /api/tickets/<id>/ - Atualizar ticket
    DELETE /api/tickets/<id>/ - Excluir ticket (admin)
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        usuario = usuario_atual(request)
        ticket = self.get_service('obter_ticket_service').execute(pk, usuario)
        return json_response(success=True, data=ticket.to_dict())

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Atualiza ticket parcialmente.

        Campos aceitos: organization, location, notes, expirationDate,
        coordinates, addressData, status, assignedTo (apenas admin).
        """
        usuario = usuario_atual(request)
        data = self.parse_body(request)

        input_dto = AtualizarTicketInputDTO(
            organizacao=data.get('organization'),
            localizacao=data.get('location'),
            observacoes=data.get('notes'),
            data_expiracao=parse_expiration(data.get('expirationDate')),
            coordenadas=data.get('coordinates'),
            endereco=data.get('addressData'),
            status=data.get('status'),
            atribuido_a_id=data.get('assignedTo'),
        )

        output = self.get_service('atualizar_ticket_service').execute(pk, input_dto, usuario)
        return json_response(success=True, data=output.to_dict())

    def put(self, request: HttpRequest, pk: str) -> JsonResponse:
        return self.patch(request, pk)

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        usuario = usuario_atual(request)
        removidos = self.get_service('excluir_ticket_service').execute(pk, usuario)

        logger.info(f"API: Ticket {pk} excluído por {usuario}")

        return json_response(
            success=True,
            data={'id': pk, 'deleted': True, 'alertsDeleted': removidos},
        )


class TicketAPIRenovarView(BaseAPIView):
    """
    POST /api/tickets/<id>/renew/

    Body JSON (opcional):
    {
        "days": 15
    }
    """

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        usuario = usuario_atual(request)
        data = self.parse_body(request)

        output = self.get_service('renovar_ticket_service').execute(
            pk,
            usuario,
            dias=data.get('days'),
        )

        return json_response(success=True, data=output.to_dict())


class TicketAPIFecharView(BaseAPIView):
    """POST /api/tickets/<id>/close/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        usuario = usuario_atual(request)
        output = self.get_service('fechar_ticket_service').execute(pk, usuario)
        return json_response(success=True, data=output.to_dict())


class TicketAPIEstatisticasView(BaseAPIView):
    """GET /api/tickets/stats/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        usuario = usuario_atual(request)
        estatisticas = self.get_service('estatisticas_tickets_service').execute(usuario)
        return json_response(success=True, data=estatisticas.to_dict())


class TicketAPIGerarNumeroView(BaseAPIView):
    """GET /api/tickets/generate-number/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        usuario_atual(request)
        numero = self.get_service('gerar_numero_ticket_service').execute()
        return json_response(success=True, data=numero.to_dict())


class TicketAPIVerificarNumeroView(BaseAPIView):
    """GET /api/tickets/check-number/<numero>/"""

    def get(self, request: HttpRequest, numero: str) -> JsonResponse:
        usuario_atual(request)
        resultado = self.get_service('verificar_numero_ticket_service').execute(numero)
        return json_response(success=True, data=resultado.to_dict())


# =============================================================================
# Alert API Views
# =============================================================================

class AlertAPIListView(BaseAPIView):
    """
    GET /api/alerts/

    Query params: type, unreadOnly, ticketId, page, limit (default 50)
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        usuario = usuario_atual(request)

        query = ListarAlertasQueryDTO(
            tipo=request.GET.get('type') or None,
            apenas_nao_lidos=bool_param(request, 'unreadOnly'),
            ticket_id=request.GET.get('ticketId') or None,
            pagina=int_param(request, 'page', 1),
            por_pagina=int_param(request, 'limit', ListarAlertasQueryDTO.por_pagina),
        )

        resultado = self.get_service('listar_alertas_service').execute(query, usuario)

        return json_response(
            success=True,
            data=[a.to_dict() for a in resultado.items],
            meta={'pagination': resultado.pagination_dict()},
        )


class AlertAPIDetailView(BaseAPIView):
    """
    GET /api/alerts/<id>/
    PATCH /api/alerts/<id>/  {"isRead": true|false}
    DELETE /api/alerts/<id>/ (admin)
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        usuario = usuario_atual(request)
        alerta = self.get_service('obter_alerta_service').execute(pk, usuario)
        return json_response(success=True, data=alerta.to_dict())

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        usuario = usuario_atual(request)
        data = self.parse_body(request)

        lido = data.get('isRead')
        if lido is not None and not isinstance(lido, bool):
            raise ValidationError("isRead must be a boolean", field="isRead")

        alerta = self.get_service('atualizar_alerta_service').execute(pk, usuario, lido=lido)
        return json_response(success=True, data=alerta.to_dict())

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        usuario = usuario_atual(request)
        self.get_service('excluir_alerta_service').execute(pk, usuario)
        return json_response(success=True, data={'id': pk, 'deleted': True})


class AlertAPIMarcarTodosView(BaseAPIView):
    """PATCH /api/alerts/mark-all-read/"""

    def patch(self, request: HttpRequest) -> JsonResponse:
        usuario = usuario_atual(request)
        alterados = self.get_service('marcar_todos_lidos_service').execute(usuario)
        return json_response(success=True, data={'modifiedCount': alterados})

    def post(self, request: HttpRequest) -> JsonResponse:
        return self.patch(request)


class AlertAPIEstatisticasView(BaseAPIView):
    """GET /api/alerts/stats/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        usuario = usuario_atual(request)
        estatisticas = self.get_service('estatisticas_alertas_service').execute(usuario)
        return json_response(success=True, data=estatisticas.to_dict())


# =============================================================================
# Expiration Monitor
# =============================================================================

class MonitorAPIView(BaseAPIView):
    """
    GET /api/monitor/ - Estado do scheduler e última verificação
    POST /api/monitor/run/ - Verificação manual síncrona (admin)
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        usuario = usuario_atual(request)
        exigir_admin(usuario, "view the expiration monitor")

        scheduler = self.get_container().expiration_scheduler()

        # lastRun vem do cache: a verificação pode ter rodado no worker Celery
        return json_response(
            success=True,
            data={
                'running': scheduler.is_running,
                'intervalSeconds': scheduler.intervalo_segundos,
                'lastRun': ultima_verificacao(),
            },
        )

    def post(self, request: HttpRequest) -> JsonResponse:
        usuario = usuario_atual(request)
        exigir_admin(usuario, "run the expiration check")

        logger.info(f"API: Verificação de expiração manual por {usuario}")

        resultado = self.get_container().expiration_scheduler().executar_agora()
        return json_response(success=True, data=resultado.to_dict())
