"""
Tests for health, readiness, and metrics endpoints, and the request middleware.
"""
import sqlite3

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routers import health_router
from core import dependencies as deps
from core.middleware import LoggingMiddleware, MetricsCollector, REQUEST_ID_HEADER


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "Patient Records Service"
    assert data["patients"] == "/patients"


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "1.0.0"
    assert "timestamp" in data


def test_ready_endpoint(client):
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["dependencies"][0]["name"] == "database"
    assert data["dependencies"][0]["status"] == "ok"


def test_ready_endpoint_database_unavailable(temp_db, test_app):
    conn = sqlite3.connect(temp_db.db_path)
    conn.execute("DROP TABLE patient")
    conn.commit()
    conn.close()

    response = TestClient(test_app).get("/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    assert data["dependencies"][0]["status"] == "unavailable"


def test_metrics_endpoint(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "text/plain" in response.headers.get("content-type", "")
    assert "http_requests_total" in response.text
    assert "http_request_duration_ms" in response.text


def test_metrics_json_endpoint(client):
    response = client.get("/metrics/json")
    assert response.status_code == 200
    data = response.json()
    assert "http_requests_total" in data
    assert "http_requests_4xx_total" in data
    assert "http_request_duration_ms_p99" in data


def test_metrics_collector_counts_by_status():
    collector = MetricsCollector(window=2)
    for code, duration in ((200, 10.0), (400, 20.0), (500, 30.0)):
        collector.observe(code, duration)

    summary = collector.get_summary()
    assert summary["http_requests_total"] == 3
    assert summary["http_requests_2xx_total"] == 1
    assert summary["http_requests_4xx_total"] == 1
    assert summary["http_requests_5xx_total"] == 1
    # Only the two most recent durations are kept
    assert summary["http_request_duration_ms_p50"] == 30.0


def test_metrics_collector_prometheus_text():
    collector = MetricsCollector()
    assert collector.get_summary()["http_request_duration_ms_p99"] == 0.0

    collector.observe(400, 12.5)
    text = collector.get_prometheus_format()

    assert 'patient_svc_http_requests_total{status="4xx"} 1' in text
    assert 'patient_svc_http_requests_total{status="2xx"} 0' in text
    assert 'patient_svc_http_request_duration_ms{quantile="0.99"} 12.5' in text


def test_logging_middleware_sets_request_id(temp_db):
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
    app.dependency_overrides[deps.get_database] = lambda: temp_db
    app.include_router(health_router)

    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert len(response.headers[REQUEST_ID_HEADER]) == 8
