"""
Agendador em processo do monitor de expiração.

Alternativa ao Celery beat para implantações de processo único:
uma thread daemon executa uma verificação ao iniciar e depois a cada
intervalo, até `stop()`.
"""

import logging
import threading
from typing import Callable, Optional

from .monitor import ExpirationMonitorService, ResultadoVerificacao

logger = logging.getLogger(__name__)


class ExpirationScheduler:
    """
    Ciclo de vida explícito do monitor de expiração.

    - start(): verificação imediata + repetição a cada intervalo
    - stop(): sinaliza e aguarda a thread (verificação em andamento termina)
    - executar_agora(): disparo manual síncrono

    Verificações nunca se sobrepõem: agendada e manual compartilham um lock.

    Ganchos opcionais, fornecidos pela camada de adapters:
    - manutencao: chamado antes e depois de cada verificação da thread
      (ex.: reciclar conexões de banco de longa duração)
    - ao_concluir: recebe cada ResultadoVerificacao (ex.: publicar o
      estado da última verificação para outros processos)

    Example:
        scheduler = ExpirationScheduler(monitor, intervalo_segundos=1800)
        scheduler.start()
        ...
        scheduler.stop(timeout=10)
    """

    def __init__(
        self,
        monitor: ExpirationMonitorService,
        intervalo_segundos: Optional[float] = None,
        manutencao: Optional[Callable[[], None]] = None,
        ao_concluir: Optional[Callable[[ResultadoVerificacao], None]] = None,
    ):
        self.monitor = monitor
        self.intervalo_segundos = intervalo_segundos or monitor.politica.intervalo_segundos
        self.manutencao = manutencao
        self.ao_concluir = ao_concluir
        self.ultimo_resultado: Optional[ResultadoVerificacao] = None

        self._parar = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._ciclo_lock = threading.Lock()
        self._execucao_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """
        Inicia a thread de verificação.

        Returns:
            False se já estava em execução
        """
        with self._ciclo_lock:
            if self.is_running:
                logger.info("Monitor de expiração já está em execução")
                return False

            self._parar.clear()
            self._thread = threading.Thread(
                target=self._loop,
                name="expiration-monitor",
                daemon=True,
            )
            self._thread.start()

        logger.info(f"Monitor de expiração iniciado (intervalo {self.intervalo_segundos}s)")
        return True

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Para a thread de verificação.

        Args:
            timeout: Segundos para aguardar a thread (None = indefinido)

        Returns:
            True se a thread terminou dentro do timeout
        """
        with self._ciclo_lock:
            thread = self._thread
            if thread is None:
                return True

            self._parar.set()
            thread.join(timeout)
            parou = not thread.is_alive()
            if parou:
                self._thread = None

        if parou:
            logger.info("Monitor de expiração parado")
        else:
            logger.warning(f"Monitor de expiração não parou em {timeout}s")
        return parou

    def executar_agora(self) -> ResultadoVerificacao:
        """
        Executa uma verificação imediatamente e aguarda o término.

        Se uma verificação agendada estiver em andamento, espera ela
        terminar antes de começar.
        """
        with self._execucao_lock:
            resultado = self.monitor.executar()
            self.ultimo_resultado = resultado

        if self.ao_concluir is not None:
            try:
                self.ao_concluir(resultado)
            except Exception:
                logger.exception("Falha ao registrar resultado da verificação")

        return resultado

    def _loop(self) -> None:
        self._executar_protegido()
        while not self._parar.wait(self.intervalo_segundos):
            self._executar_protegido()

    def _executar_protegido(self) -> None:
        self._manter()
        try:
            self.executar_agora()
        except Exception:
            logger.exception("Verificação de expiração falhou")
        finally:
            self._manter()

    def _manter(self) -> None:
        if self.manutencao is None:
            return
        try:
            self.manutencao()
        except Exception:
            logger.exception("Falha na manutenção do monitor de expiração")
