"""Tests for docscript API endpoints."""
import base64
import io
import pytest
import sys
import zipfile
from pathlib import Path

project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from fastapi.testclient import TestClient

from api.main import app

DOCUMENT = (
    '<svg xmlns="http://www.w3.org/2000/svg" contentScriptType="text/python">'
    '<script type="text/python">total = 1</script>'
    '<g onload="total += 1"/>'
    "</svg>"
)


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


class TestHealthEndpoint:
    """Tests for /health endpoints."""

    def test_health(self, client):
        """Test health check."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "docscript-api"

    def test_ready(self, client):
        """Test readiness lists the served languages."""
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert "text/python" in response.json()["languages"]

    def test_root(self, client):
        """Test API root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "docscript API"


class TestClassifyEndpoint:
    """Tests for /api/v1/classify endpoint."""

    def test_dynamic(self, client):
        """Test classifying a dynamic document."""
        response = client.post("/api/v1/classify", json={"document": DOCUMENT})
        assert response.status_code == 200
        assert response.json()["dynamic"] is True

    def test_static(self, client):
        """Test classifying a static document."""
        response = client.post("/api/v1/classify",
                               json={"document": '<svg xmlns="http://www.w3.org/2000/svg"/>'})
        assert response.json()["dynamic"] is False

    def test_malformed(self, client):
        """Test malformed markup is rejected with 422."""
        response = client.post("/api/v1/classify", json={"document": "<svg><g></svg>"})
        assert response.status_code == 422

    def test_missing_document(self, client):
        """Test a request without a document is rejected."""
        response = client.post("/api/v1/classify", json={})
        assert response.status_code == 422


class TestRunEndpoint:
    """Tests for /api/v1/run endpoint."""

    def test_run(self, client):
        """Test running inline scripts and the load event."""
        response = client.post("/api/v1/run", json={"document": DOCUMENT})
        assert response.status_code == 200
        data = response.json()
        assert data["dynamic"] is True
        assert data["report"]["counts"]["executed"] == 1
        assert data["errors"] == []

    def test_external_refused_by_default(self, client):
        """Test external scripts are refused under the default embedded origin."""
        document = DOCUMENT.replace(
            "</svg>", '<script type="text/python" href="http://localhost/lib.py"/></svg>')
        response = client.post("/api/v1/run", json={"document": document, "dispatch_load": False})
        data = response.json()
        assert data["report"]["counts"]["skipped"] == 1
        assert data["errors"][0]["kind"] == "POLICY_DENIED"

    def test_evaluation_error_reported(self, client):
        """Test a failing script is reported in the response."""
        document = DOCUMENT.replace("total = 1", "total = 1 / 0")
        response = client.post("/api/v1/run", json={"document": document, "dispatch_load": False})
        data = response.json()
        assert data["report"]["aborted"] is True
        assert data["errors"][0]["exception_type"] == "ZeroDivisionError"

    def test_static_document(self, client):
        """Test static documents are not run."""
        response = client.post("/api/v1/run",
                               json={"document": '<svg xmlns="http://www.w3.org/2000/svg"/>'})
        assert response.json() == {"dynamic": False, "report": None, "errors": []}

    def test_malformed(self, client):
        """Test malformed markup is rejected with 422."""
        response = client.post("/api/v1/run", json={"document": "<svg"})
        assert response.status_code == 422

    def test_invalid_origin(self, client):
        """Test an unknown origin is rejected by validation."""
        response = client.post("/api/v1/run", json={"document": DOCUMENT, "origin": "sometimes"})
        assert response.status_code == 422

    @pytest.mark.parametrize("origin", ["any", "document"])
    def test_remote_origins_rejected(self, client, origin):
        """Test clients cannot widen the origin to remote scripts."""
        response = client.post("/api/v1/run", json={"document": DOCUMENT, "origin": origin})
        assert response.status_code == 422

    def test_native_bundle_refused(self, client, tmp_path):
        """Test a posted native bundle is denied and its handler never runs."""
        marker = tmp_path / "marker"
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            zf.writestr("META-INF/MANIFEST.MF", "Script-Handler: apihandler:Handler\n")
            zf.writestr("apihandler.py",
                        "import pathlib\n\nclass Handler:\n"
                        "    def run(self, document, window):\n"
                        f"        pathlib.Path({str(marker)!r}).write_text('x')\n")
        href = "data:application/zip;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")
        document = DOCUMENT.replace(
            "</svg>",
            '<script type="application/x-python-archive" '
            f'xmlns:xlink="http://www.w3.org/1999/xlink" xlink:href="{href}"/></svg>')

        response = client.post("/api/v1/run", json={"document": document, "dispatch_load": False})
        data = response.json()

        assert response.status_code == 200
        assert data["report"]["outcomes"][1]["status"] == "skipped"
        assert data["errors"][0]["kind"] == "POLICY_DENIED"
        assert not marker.exists()
