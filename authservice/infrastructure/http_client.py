# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Outbound HTTP calls wrapped in client spans."""

from __future__ import annotations

import httpx
from opentelemetry import trace
from opentelemetry.propagate import inject
from opentelemetry.trace import SpanKind

from authservice.domain.users.repositories import DownstreamProbe
from authservice.shared.logging import logger

from .tracing import TRACER_NAME


class TracedHttpClient:
    def __init__(
        self,
        *,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
        tracer_provider: trace.TracerProvider | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._tracer_provider = tracer_provider

    def _tracer(self) -> trace.Tracer:
        if self._tracer_provider is not None:
            return self._tracer_provider.get_tracer(TRACER_NAME)
        return trace.get_tracer(TRACER_NAME)

    def get(self, url: str) -> httpx.Response:
        with self._tracer().start_as_current_span("HTTP GET", kind=SpanKind.CLIENT) as span:
            span.set_attribute("http.request.method", "GET")
            span.set_attribute("url.full", url)

            headers: dict[str, str] = {}
            inject(headers)
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(url, headers=headers)

            span.set_attribute("http.response.status_code", response.status_code)
            return response


class HttpDownstreamProbe(DownstreamProbe):
    """Best-effort GET against a downstream service; failures are only logged."""

    def __init__(self, client: TracedHttpClient, url: str) -> None:
        self._client = client
        self._url = url

    def ping(self) -> bool:
        try:
            response = self._client.get(self._url)
        except httpx.HTTPError as exc:
            logger.warning(f"downstream.probe: {self._url} unreachable: {type(exc).__name__}")
            return False
        except Exception as exc:
            # Bad URLs (httpx.InvalidURL) and tracer failures land here; login must not see them.
            logger.opt(exception=exc).warning(f"downstream.probe: {self._url} failed")
            return False

        if not response.is_success:
            logger.warning(f"downstream.probe: {self._url} answered {response.status_code}")
            return False
        logger.debug(f"downstream.probe: {self._url} ok")
        return True


__all__ = ["HttpDownstreamProbe", "TracedHttpClient"]
