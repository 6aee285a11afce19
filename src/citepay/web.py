"""Flask JSON front end for the citation payment workflow.

Each browser session owns one PaymentWorkflow, created when the session opens
a citation flow and dropped on reset or when the store evicts it.
"""
import asyncio
import logging
import threading
import uuid
from collections import OrderedDict
from typing import Optional, Tuple

from flask import Flask, jsonify, request, session

from .clipboard import InMemoryClipboard
from .config import Config
from .errors import (
    InvalidTransitionError,
    NoWorkLoadedError,
    UnknownStyleError,
    WorkNotFoundError,
    WorkRepositoryError,
)
from .formatting import default_formatter
from .models import CitationStyle
from .payments import HttpPaymentService, SimulatedPaymentService
from .repository import HttpWorkRepository, JsonWorkRepository, WorkRepository
from .workflow import PaymentWorkflow, WorkflowSnapshot, WorkflowState

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = Config.SECRET_KEY

FlowEntry = Tuple[PaymentWorkflow, threading.Lock]

IDLE_SNAPSHOT = WorkflowSnapshot(state=WorkflowState.IDLE)


class WorkflowStore:
    """Session workflows, each with its own lock. Least recently used go first."""

    def __init__(self, max_flows: int):
        self.max_flows = max_flows
        self._flows: "OrderedDict[str, FlowEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._flows)

    def get(self, flow_id: Optional[str]) -> Optional[FlowEntry]:
        if not flow_id:
            return None
        with self._lock:
            entry = self._flows.get(flow_id)
            if entry is not None:
                self._flows.move_to_end(flow_id)
            return entry

    def create(self, workflow: PaymentWorkflow) -> Tuple[str, FlowEntry]:
        flow_id = uuid.uuid4().hex
        entry = (workflow, threading.Lock())
        with self._lock:
            self._flows[flow_id] = entry
            while len(self._flows) > self.max_flows:
                evicted_id, _ = self._flows.popitem(last=False)
                logger.info(f"Evicted citation flow {evicted_id}")
        return flow_id, entry

    def discard(self, flow_id: Optional[str]) -> None:
        with self._lock:
            self._flows.pop(flow_id, None)

    def clear(self) -> None:
        with self._lock:
            self._flows.clear()


flows = WorkflowStore(Config.MAX_FLOWS)


# Set WORK_REPOSITORY / PAYMENT_SERVICE_FACTORY in app.config to override
def get_repository() -> WorkRepository:
    repository = app.config.get("WORK_REPOSITORY")
    if repository is None:
        if Config.WORKS_API_URL:
            repository = HttpWorkRepository(Config.WORKS_API_URL)
        else:
            repository = JsonWorkRepository(Config.WORKS_FILE)
        app.config["WORK_REPOSITORY"] = repository
    return repository


def _new_payment_service():
    factory = app.config.get("PAYMENT_SERVICE_FACTORY")
    if factory is not None:
        return factory()
    if Config.PAYMENT_API_URL:
        return HttpPaymentService(Config.PAYMENT_API_URL)
    return SimulatedPaymentService()


def current_flow() -> Optional[FlowEntry]:
    """Workflow and lock of the current session, if it has an open flow."""
    return flows.get(session.get("flow_id"))


def _require_flow(operation: str) -> FlowEntry:
    entry = current_flow()
    if entry is None:
        raise InvalidTransitionError(operation, WorkflowState.IDLE)
    return entry


def _flow_response(snapshot, status: int = 200):
    return jsonify({"success": True, "flow": snapshot.to_dict()}), status


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route("/health", methods=["GET"])
def health():
    return "ok", 200


@app.route("/works/<work_id>/citations", methods=["GET"])
def work_citations(work_id):
    """Citation text for a work, in one style (``?style=``) or all."""
    work = get_repository().fetch_work(work_id)
    style = request.args.get("style")
    if style:
        resolved = CitationStyle.parse(style)
        citations = {resolved.value: default_formatter.format(work, work.authors, resolved)}
        in_text = {resolved.value: default_formatter.in_text_citation(work, resolved)}
    else:
        citations = {s.value: text for s, text in default_formatter.format_all(work).items()}
        in_text = {s.value: default_formatter.in_text_citation(work, s) for s in default_formatter.styles}
    return jsonify({
        "success": True,
        "work_id": work.identifier,
        "citations": citations,
        "in_text": in_text,
    })


@app.route("/citation-flow", methods=["GET"])
def citation_flow():
    entry = current_flow()
    if entry is None:
        return _flow_response(IDLE_SNAPSHOT)
    workflow, lock = entry
    with lock:
        return _flow_response(workflow.snapshot())


@app.route("/citation-flow/open", methods=["POST"])
def open_flow():
    work_id = _payload().get("work_id")
    if not work_id:
        return jsonify({"success": False, "error": "work_id is required"}), 400
    work = get_repository().fetch_work(str(work_id))

    entry = current_flow()
    if entry is None:
        workflow = PaymentWorkflow(_new_payment_service(), clipboard=InMemoryClipboard())
        flow_id, entry = flows.create(workflow)
        session["flow_id"] = flow_id
    workflow, lock = entry
    with lock:
        return _flow_response(workflow.open_citation_flow(work))


@app.route("/citation-flow/fields", methods=["POST"])
def update_fields():
    """Apply any of ``amount``, ``style`` and ``purpose``."""
    data = _payload()
    workflow, lock = _require_flow("update fields")
    with lock:
        snapshot = workflow.snapshot()
        if "style" in data:
            snapshot = workflow.set_style(data["style"])
        if "amount" in data:
            snapshot = workflow.set_amount(data["amount"])
        if "purpose" in data:
            snapshot = workflow.set_purpose(data["purpose"])
        return _flow_response(snapshot)


@app.route("/citation-flow/default-amount", methods=["POST"])
def default_amount():
    workflow, lock = _require_flow("set amount")
    with lock:
        return _flow_response(workflow.use_default_amount())


@app.route("/citation-flow/submit", methods=["POST"])
def submit():
    """Submit the session's citation payment.

    The lock is held to start and to finish the attempt but not while the
    payment service is awaited, so a concurrent submit sees SUBMITTING.
    """
    workflow, lock = _require_flow("submit")
    with lock:
        attempt = workflow.begin_submission()
        snapshot = workflow.snapshot()
    if attempt is None:
        return _flow_response(snapshot)

    outcome = asyncio.run(workflow.call_payment_service(attempt))
    with lock:
        return _flow_response(workflow.complete_submission(attempt.attempt_id, outcome))


@app.route("/citation-flow/retry", methods=["POST"])
def retry():
    workflow, lock = _require_flow("retry")
    with lock:
        return _flow_response(workflow.retry_after_failure())


@app.route("/citation-flow/reset", methods=["POST"])
def reset():
    entry = current_flow()
    flow_id = session.pop("flow_id", None)
    if entry is not None:
        workflow, lock = entry
        with lock:
            workflow.reset()
        flows.discard(flow_id)
    return _flow_response(IDLE_SNAPSHOT)


@app.errorhandler(UnknownStyleError)
def unknown_style(error):
    return jsonify({"success": False, "error": str(error)}), 400


@app.errorhandler(InvalidTransitionError)
@app.errorhandler(NoWorkLoadedError)
def invalid_transition(error):
    return jsonify({"success": False, "error": str(error)}), 409


@app.errorhandler(WorkNotFoundError)
def work_not_found(error):
    return jsonify({"success": False, "error": str(error)}), 404


@app.errorhandler(WorkRepositoryError)
def repository_error(error):
    logger.error(f"Work repository error: {error}")
    return jsonify({"success": False, "error": "Work metadata unavailable"}), 502
