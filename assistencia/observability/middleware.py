"""
Observability Middleware

Flask auto-instrumentation plus one structured log line per request.
"""

import time
import logging
from flask import Flask, Response, request, g
from opentelemetry import trace
from opentelemetry.instrumentation.flask import FlaskInstrumentor

logger = logging.getLogger(__name__)

TRACE_HEADER = 'X-Trace-Id'


def _current_trace_id():
    span = trace.get_current_span()
    if not span.is_recording():
        return None
    return format(span.get_span_context().trace_id, "032x")


def add_observability_middleware(app: Flask):
    """Instrument ``app`` and log method, path, status and duration of every request."""
    FlaskInstrumentor().instrument_app(app)

    @app.before_request
    def start_request_timer():
        g.request_started = time.perf_counter()
        g.trace_id = _current_trace_id()

    @app.after_request
    def log_request(response: Response):
        started = g.get('request_started')
        duration_ms = round((time.perf_counter() - started) * 1000, 2) if started else None

        span = trace.get_current_span()
        if span.is_recording():
            span.set_attribute("http.duration_ms", duration_ms or 0.0)
            if g.get('user_id'):
                span.set_attribute("enduser.id", g.user_id)

        logger.info(
            f"{request.method} {request.path} {response.status_code}",
            extra={
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "user_id": g.get('user_id'),
                "trace_id": g.get('trace_id')
            }
        )

        if g.get('trace_id'):
            response.headers[TRACE_HEADER] = g.trace_id

        return response
