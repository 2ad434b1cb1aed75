"""
OpenTelemetry Configuration

Tracing and log-level setup for the social-assistance API. Sampling and span
export depend on ``ENVIRONMENT``; tracing can be switched off entirely with
``OTEL_ENABLED=false``.
"""

import os
import logging
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import Sampler, TraceIdRatioBased
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

SERVICE_NAME = 'assistencia-social-api'

SAMPLING_RATIOS = {
    'production': 0.1,
    'staging': 0.5,
}

LOG_LEVELS = {
    'production': logging.WARNING,
    'staging': logging.INFO,
    'development': logging.INFO,
    'test': logging.WARNING,
}

_tracer_provider = None


def _sampler_for(environment: str) -> Sampler:
    return TraceIdRatioBased(SAMPLING_RATIOS.get(environment, 1.0))


def _attach_exporters(provider: TracerProvider, environment: str) -> None:
    """Console spans in development, OTLP in staging and production."""
    if environment == 'development':
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        return

    endpoint = os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
    if endpoint and environment in ('production', 'staging'):
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint), max_export_batch_size=512)
        )


def setup_observability():
    """Configure logging, then install the tracer provider once per process."""
    global _tracer_provider

    environment = os.getenv('ENVIRONMENT', 'development')
    setup_structured_logging(environment)

    if os.getenv('OTEL_ENABLED', 'true').lower() != 'true' or _tracer_provider is not None:
        return

    resource = Resource.create({
        "service.name": SERVICE_NAME,
        "service.version": os.getenv('SERVICE_VERSION', '1.0.0'),
        "deployment.environment": environment
    })

    _tracer_provider = TracerProvider(sampler=_sampler_for(environment), resource=resource)
    _attach_exporters(_tracer_provider, environment)
    trace.set_tracer_provider(_tracer_provider)


def setup_structured_logging(environment: str):
    """Set the root log level for the environment and quiet chatty libraries."""
    logging.basicConfig(
        level=LOG_LEVELS.get(environment, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
        handlers=[logging.StreamHandler()]
    )

    if environment == 'production':
        for noisy in ('pymongo', 'werkzeug'):
            logging.getLogger(noisy).setLevel(logging.WARNING)
    elif environment == 'development':
        logging.getLogger('assistencia.services').setLevel(logging.DEBUG)
