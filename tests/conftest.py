import asyncio
import json
import re
from contextlib import asynccontextmanager

import httpx
import pytest

from plastic_audit.core.api_client import BackendClient
from plastic_audit.modules.audits import WizardRegistry

BACKEND_URL = "http://backend.test"
STORAGE_HOST = "storage.test"
SCHOOL_ID = "school-1"


class FakeBackend:
    """
    In-memory stand-in for the platform REST backend and object storage,
    served through httpx.MockTransport.
    """

    def __init__(self):
        self.schools = {
            SCHOOL_ID: {"id": SCHOOL_ID, "name": "Green Valley Primary", "studentCount": 320},
        }
        self.audits = {}
        self.promises = []
        self.submissions = []
        self.stored_objects = {}
        self.requests = []
        self.failing = set()
        self.failing_promise_labels = set()
        self.storage_fails = False
        self._counter = 0

    # Inspection helpers

    def calls(self, method=None, path=None):
        return [
            r for r in self.requests
            if (method is None or r[0] == method) and (path is None or r[1] == path)
        ]

    def body_of(self, method, path):
        matches = self.calls(method, path)
        return matches[-1][2] if matches else None

    def add_audit(self, **fields):
        audit_id = fields.pop("id", None) or self._next_id("audit")
        record = {"id": audit_id, "schoolId": SCHOOL_ID, "status": "draft", "currentPart": 1}
        record.update(fields)
        self.audits[audit_id] = record
        return record

    def fail(self, method, path):
        self.failing.add((method, path))

    # Transport

    def _next_id(self, prefix):
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        body = None
        if request.content and "json" in request.headers.get("content-type", ""):
            body = json.loads(request.content)
        self.requests.append((method, path, body))

        if request.url.host == STORAGE_HOST:
            if self.storage_fails:
                return httpx.Response(403, text="Signature expired")
            self.stored_objects[path] = request.content
            return httpx.Response(200)

        if (method, path) in self.failing:
            return httpx.Response(500, json={"message": "Internal server error"})

        for pattern, route_method, handle in self._routes():
            match = re.fullmatch(pattern, path)
            if match and route_method == method:
                return handle(body, *match.groups())
        return httpx.Response(404, json={"message": "Not found"})

    def _routes(self):
        return (
            (r"/api/schools/([^/]+)", "GET", self._get_school),
            (r"/api/audits/school/([^/]+)", "GET", self._get_audit_for_school),
            (r"/api/audits", "POST", self._save_audit),
            (r"/api/audits/([^/]+)/submit", "POST", self._submit_audit),
            (r"/api/audits/([^/]+)/results-pdf", "GET", self._results_pdf),
            (r"/api/reduction-promises/audit/([^/]+)", "GET", self._list_promises),
            (r"/api/reduction-promises", "POST", self._create_promise),
            (r"/api/uploads/printable-forms/signed-url", "POST", self._signed_url),
            (r"/api/printable-form-submissions", "POST", self._create_submission),
            (r"/api/admin/audits/pending", "GET", self._pending_audits),
            (r"/api/admin/audits/([^/]+)/review", "PUT", self._review_audit),
        )

    def _get_school(self, body, school_id):
        school = self.schools.get(school_id)
        if school is None:
            return httpx.Response(404, json={"message": "School not found"})
        return httpx.Response(200, json=school)

    def _get_audit_for_school(self, body, school_id):
        audit = next((a for a in self.audits.values() if a["schoolId"] == school_id), None)
        return httpx.Response(200, json=audit)

    def _save_audit(self, body):
        audit_id = body.get("id")
        if audit_id and audit_id in self.audits:
            self.audits[audit_id].update(body)
        else:
            audit_id = self._next_id("audit")
            self.audits[audit_id] = {**body, "id": audit_id}
        return httpx.Response(200, json=self.audits[audit_id])

    def _submit_audit(self, body, audit_id):
        audit = self.audits[audit_id]
        audit["status"] = "submitted"
        return httpx.Response(200, json=audit)

    def _results_pdf(self, body, audit_id):
        return httpx.Response(
            200, content=b"%PDF-1.4 results", headers={"content-type": "application/pdf"}
        )

    def _list_promises(self, body, audit_id):
        return httpx.Response(200, json=[p for p in self.promises if p["auditId"] == audit_id])

    def _create_promise(self, body):
        if body["plasticItemLabel"] in self.failing_promise_labels:
            return httpx.Response(500, json={"message": "Failed to create promise"})
        promise = {**body, "id": self._next_id("promise")}
        self.promises.append(promise)
        return httpx.Response(201, json=promise)

    def _signed_url(self, body):
        object_id = self._next_id("object")
        return httpx.Response(
            200,
            json={
                "uploadUrl": f"https://{STORAGE_HOST}/bucket/{object_id}?signature=abc",
                "objectPath": f"/objects/printable-forms/{object_id}",
            },
        )

    def _create_submission(self, body):
        submission = {**body, "id": self._next_id("submission"), "status": "pending"}
        self.submissions.append(submission)
        return httpx.Response(201, json=submission)

    def _pending_audits(self, body):
        return httpx.Response(
            200, json=[a for a in self.audits.values() if a.get("status") == "submitted"]
        )

    def _review_audit(self, body, audit_id):
        audit = self.audits.get(audit_id)
        if audit is None:
            return httpx.Response(404, json={"message": "Audit not found"})
        audit["status"] = "approved" if body["approved"] else "rejected"
        audit["reviewNotes"] = body.get("reviewNotes")
        return httpx.Response(200, json=audit)


def fill_valid_audit(wizard):
    """Enter a complete audit: 2 + 3 + 1 plastic bottles a day."""
    wizard.update_step(1, {"schoolName": "Green Valley Primary", "auditDate": "2026-03-02"})
    wizard.update_step(2, {"lunchroomPlasticBottles": "2", "staffroomPlasticBottles": "3"})
    wizard.update_step(3, {"selectedOffice": True, "officePlasticBottles": "1"})
    wizard.update_step(4, {"plasticWasteDestination": "General waste collection"})


@pytest.fixture
def fill_audit():
    return fill_valid_audit


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def backend_client(backend):
    return BackendClient(base_url=BACKEND_URL, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def registry(backend_client):
    return WizardRegistry(backend_client)


@pytest.fixture
def wizard(registry):
    return registry.get(SCHOOL_ID)


@pytest.fixture
def app(backend):
    from plastic_audit.main import create_app

    @asynccontextmanager
    async def lifespan(app):
        client = BackendClient(base_url=BACKEND_URL, transport=httpx.MockTransport(backend.handler))
        app.state.backend_client = client
        app.state.wizard_registry = WizardRegistry(client)
        yield
        await client.aclose()

    return create_app(lifespan=lifespan)


@pytest.fixture
def slow_wizard(backend):
    """A session whose backend calls yield to the event loop, so requests can overlap"""

    async def handler(request):
        await asyncio.sleep(0.01)
        return backend.handler(request)

    client = BackendClient(base_url=BACKEND_URL, transport=httpx.MockTransport(handler))
    return WizardRegistry(client).get(SCHOOL_ID)
