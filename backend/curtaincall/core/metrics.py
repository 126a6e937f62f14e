"""
Prometheus metrics configuration
"""
import os

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    Info,
    generate_latest
)
from prometheus_client.multiprocess import MultiProcessCollector
from prometheus_client.registry import REGISTRY

if os.environ.get('PROMETHEUS_MULTIPROC_DIR'):
    REGISTRY = MultiProcessCollector(REGISTRY)

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'curtaincall_http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'curtaincall_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_errors_total = Counter(
    'curtaincall_http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

# ============================================================================
# Booking Metrics
# ============================================================================

bookings_created_total = Counter(
    'curtaincall_bookings_created_total',
    'Bookings created',
    ['venue']
)

seats_booked_total = Counter(
    'curtaincall_seats_booked_total',
    'Seats sold across all bookings'
)

booking_rejections_total = Counter(
    'curtaincall_booking_rejections_total',
    'Booking attempts rejected by validation',
    ['reason']
)

discounts_redeemed_total = Counter(
    'curtaincall_discounts_redeemed_total',
    'Discount codes applied to bookings',
    ['code']
)

refunds_total = Counter(
    'curtaincall_refunds_total',
    'Refunds issued',
    ['kind']  # 'full' or 'partial'
)

app_info = Info('curtaincall_app', 'Application information')

try:
    from curtaincall import __version__
    from curtaincall.core.config import get_settings
    _settings = get_settings()
    app_info.info({
        'app_name': _settings.app_name,
        'app_env': _settings.app_env,
        'version': __version__,
    })
except Exception:
    pass  # Settings may not be available during import


def get_metrics() -> bytes:
    """Get Prometheus metrics in text format"""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
