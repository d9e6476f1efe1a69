# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""OpenTelemetry wiring and the best-effort `traced` decorator.

Tracing never changes control flow: exceptions raised by the wrapped call
are re-raised unchanged, and failures inside the tracing machinery itself
are logged and dropped.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import Flask
from opentelemetry import context as otel_context
from opentelemetry import trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.trace import Span, Status, StatusCode
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from sqlalchemy.engine import Engine

from authservice.shared.config import ObservabilityConfig
from authservice.shared.logging import logger

F = TypeVar("F", bound=Callable[..., Any])

TRACER_NAME = "authservice"


def init_tracing(config: ObservabilityConfig) -> Callable[[], None] | None:
    """Install a global tracer provider; returns its shutdown hook, or None when disabled."""
    if not config.tracing_enabled:
        logger.info("tracing: disabled")
        return None

    try:
        exporter = OTLPSpanExporter(endpoint=config.otlp_endpoint, insecure=config.otlp_insecure)
        resource = Resource.create(
            {
                SERVICE_NAME: config.service_name,
                SERVICE_VERSION: config.service_version,
                "library.language": "python",
            }
        )
        provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)
        provider.add_span_processor(BatchSpanProcessor(exporter, schedule_delay_millis=1000))
    except Exception:
        logger.exception("tracing: exporter setup failed, continuing without tracing")
        return None

    trace.set_tracer_provider(provider)
    set_global_textmap(
        CompositePropagator([TraceContextTextMapPropagator(), W3CBaggagePropagator()])
    )
    logger.info(
        f"tracing: exporting spans to {config.otlp_endpoint} as {config.service_name}"
    )

    def _shutdown() -> None:
        try:
            provider.shutdown()
            logger.info("tracing: provider shut down")
        except Exception:
            logger.exception("tracing: shutdown failed")

    return _shutdown


def instrument_app(
    app: Flask, engine: Engine, *, tracer_provider: trace.TracerProvider | None = None
) -> None:
    """Server spans per request (continuing an incoming `traceparent`) and a span per query."""
    try:
        FlaskInstrumentor().instrument_app(app, tracer_provider=tracer_provider)
        SQLAlchemyInstrumentor().instrument(engine=engine, tracer_provider=tracer_provider)
    except Exception:
        logger.exception("tracing: instrumentation failed, continuing without request spans")
        return
    logger.info("tracing: flask and sqlalchemy instrumented")


def _tracer(provider: trace.TracerProvider | None) -> trace.Tracer:
    if provider is not None:
        return provider.get_tracer(TRACER_NAME)
    return trace.get_tracer(TRACER_NAME)


def _open_span(
    name: str, provider: trace.TracerProvider | None
) -> tuple[Span, object] | None:
    try:
        span = _tracer(provider).start_span(name)
        token = otel_context.attach(trace.set_span_in_context(span))
    except Exception:
        logger.opt(exception=True).warning(f"tracing: could not open span {name}")
        return None
    return span, token


def _record_failure(span: Span, exc: BaseException) -> None:
    try:
        span.record_exception(exc)
        span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
    except Exception:
        logger.opt(exception=True).warning("tracing: could not record exception")


def _close_span(span: Span, token: object) -> None:
    try:
        otel_context.detach(token)
        span.end()
    except Exception:
        logger.opt(exception=True).warning("tracing: could not close span")


def traced(
    span_name: str, *, tracer_provider: trace.TracerProvider | None = None
) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            opened = _open_span(span_name, tracer_provider)
            if opened is None:
                return func(*args, **kwargs)

            span, token = opened
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                _record_failure(span, exc)
                raise
            finally:
                _close_span(span, token)

        return cast(F, wrapper)

    return decorator


__all__ = ["TRACER_NAME", "init_tracing", "instrument_app", "traced"]
