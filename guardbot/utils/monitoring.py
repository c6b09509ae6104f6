"""Модуль для мониторинга и отслеживания метрик бота."""

import logging
import os
import platform
import socket
import traceback
from typing import Any, Dict, Optional

import sentry_sdk
from prometheus_client import Counter, Histogram, start_http_server
from sentry_sdk.integrations.logging import LoggingIntegration

# Настройка логгера
logger = logging.getLogger(__name__)

# Prometheus метрики
COMMANDS_TOTAL = Counter(
    'guardbot_commands_total',
    'Total commands processed',
    ['command', 'success']
)
MESSAGES_PROCESSED = Counter(
    'guardbot_messages_processed',
    'Total messages checked by the moderation pipeline',
    ['chat_id']
)
PIPELINE_LATENCY = Histogram(
    'guardbot_pipeline_latency_seconds',
    'Moderation pipeline processing time in seconds',
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 0.75, 1.0, float('inf'))
)
AUTOMOD_ACTIONS = Counter(
    'guardbot_automod_actions_total',
    'Total automod actions taken',
    ['action_type', 'chat_id']
)
ACTUATOR_FAILURES = Counter(
    'guardbot_actuator_failures_total',
    'Enforcement requests rejected by the platform',
    ['action']
)
ERRORS_COUNT = Counter(
    'guardbot_errors_total',
    'Total errors encountered',
    ['type', 'module']
)


def init_sentry(dsn: Optional[str], environment: str = 'production') -> bool:
    """Инициализация Sentry.

    Args:
        dsn: DSN проекта, без него Sentry отключен
        environment: Окружение

    Returns:
        bool: True если Sentry включен
    """
    if not dsn:
        logger.info("Sentry отключен (DSN не настроен)")
        return False

    # Настраиваем интеграцию с логгером
    logging_integration = LoggingIntegration(
        level=logging.INFO,        # Захват логов уровня INFO и выше
        event_level=logging.ERROR  # Отправка в Sentry только ошибок уровня ERROR и выше
    )
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=1.0,
        release=os.getenv('VERSION', '1.0.0'),
        integrations=[logging_integration],
        before_send=lambda event, hint: {
            **event,
            'contexts': {
                **event.get('contexts', {}),
                'os': {'name': platform.system(), 'version': platform.version()},
                'runtime': {'name': 'python', 'version': platform.python_version()},
            }
        },
    )
    logger.info("Sentry успешно инициализирован")
    return True


def start_metrics_server(port: int = 8000) -> None:
    """Запуск сервера метрик Prometheus.

    Args:
        port: Порт для сервера метрик
    """
    try:
        # Проверяем, что порт свободен
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        result = sock.connect_ex(('127.0.0.1', port))
        if result == 0:
            logger.warning(f"Порт {port} уже используется, пробуем порт {port+1}")
            port += 1
        sock.close()

        start_http_server(port)
        logger.info(f"Метрики Prometheus доступны на порту {port}")
    except OSError as e:
        logger.error(f"Ошибка запуска сервера метрик: {e}")


def track_message(chat_id: Optional[str] = None) -> None:
    MESSAGES_PROCESSED.labels(chat_id=chat_id or 'unknown').inc()


def observe_pipeline_latency(seconds: float) -> None:
    PIPELINE_LATENCY.observe(seconds)


def track_automod_action(action: str, chat_id: str) -> None:
    """Отслеживание действий автомодерации.

    Args:
        action: Тип действия
        chat_id: ID чата
    """
    AUTOMOD_ACTIONS.labels(action_type=action, chat_id=chat_id).inc()


def track_actuator_failure(action: str) -> None:
    ACTUATOR_FAILURES.labels(action=action).inc()


def track_command(command: str, success: bool) -> None:
    COMMANDS_TOTAL.labels(command=command, success=str(success).lower()).inc()


def capture_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None
) -> None:
    """Захват и логирование ошибок.

    Args:
        error: Объект ошибки
        context: Дополнительный контекст
    """
    error_type = type(error).__name__
    ERRORS_COUNT.labels(type=error_type, module=error.__class__.__module__).inc()

    tb_str = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
    log_message = f"Ошибка: {error_type}: {error}"
    if context:
        log_message += f"\nКонтекст: {context}"
    logger.error(f"{log_message}\nТрассировка:\n{tb_str}")

    # Отправка в Sentry если настроен
    if sentry_sdk.is_initialized():
        with sentry_sdk.new_scope() as scope:
            for key, value in (context or {}).items():
                scope.set_extra(key, value)
            sentry_sdk.capture_exception(error)
