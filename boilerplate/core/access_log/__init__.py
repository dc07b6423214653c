"""
HTTP access logging: byte counting, tokens, two sinks, size-based truncation.

Usage:
    from boilerplate.core.access_log import (
        AccessLogConfig, AccessLogFormat, LogRotationWatchdog, RequestLogMiddleware, SinkRouter,
    )

    config = AccessLogConfig.from_env()
    router = SinkRouter.from_config(config)
    app.add_middleware(
        RequestLogMiddleware,
        log_format=AccessLogFormat.for_mode(config.production),
        router=router,
    )
    watchdog = LogRotationWatchdog(router.sinks, interval=config.check_interval)
    watchdog.start()  # inside the running event loop (app lifespan)
"""
from boilerplate.core.access_log.config import AccessLogConfig
from boilerplate.core.access_log.format import (
    DEVELOPMENT_FORMAT,
    PRODUCTION_FORMAT,
    AccessLogFormat,
    compile_template,
)
from boilerplate.core.access_log.middleware import RequestLogMiddleware
from boilerplate.core.access_log.recorder import STATIC_FILE_SIZE_KEY, ResponseRecorder
from boilerplate.core.access_log.rotation import LogRotationWatchdog
from boilerplate.core.access_log.sinks import AccessLogHandler, LogSink, SinkRouter
from boilerplate.core.access_log.tokens import TokenRegistry, default_registry, status_color

__all__ = [
    "AccessLogConfig",
    "AccessLogFormat",
    "AccessLogHandler",
    "DEVELOPMENT_FORMAT",
    "PRODUCTION_FORMAT",
    "LogRotationWatchdog",
    "LogSink",
    "RequestLogMiddleware",
    "ResponseRecorder",
    "STATIC_FILE_SIZE_KEY",
    "SinkRouter",
    "TokenRegistry",
    "compile_template",
    "default_registry",
    "status_color",
]
