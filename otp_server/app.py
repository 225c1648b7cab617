"""Flask application exposing the code store over JSON."""

from __future__ import annotations

import logging
import secrets

from flask import Flask, abort, jsonify, request
from flask_cors import CORS
from pydantic import ValidationError

from otp_store import CodeStore, IssueOutcome, create_store
from otp_store.logs import emit, mask_code

from .config import ServerSettings
from .schemas import IssueRequest, IssueResult, RedeemRequest, RedeemResult, ServiceResponse

LOGGER = logging.getLogger(__name__)

STAGE_LABELS = {
    "issue": "Issue",
    "redeem": "Redeem",
}

EVENT_LABELS = {
    ("issue", "start"): "Issuing Code",
    ("issue", "invalid"): "Issue Request Rejected",
    ("issue", "success"): "Issued Code",
    ("redeem", "start"): "Redeeming Code",
    ("redeem", "invalid"): "Redeem Request Rejected",
    ("redeem", "accepted"): "Code Accepted",
    ("redeem", "rejected"): "Code Rejected",
}

REJECTED_MESSAGE = "Code rejected"


def _log(stage: str, event: str, req: str, level: int = logging.INFO, **fields: object) -> None:
    emit(LOGGER, "OTP Server", STAGE_LABELS, EVENT_LABELS, stage, event, req, level, **fields)


def create_app(settings: ServerSettings | None = None, store: CodeStore | None = None) -> Flask:
    settings = settings or ServerSettings()
    store = store or create_store(settings.store)

    app = Flask(__name__)
    CORS(app, origins=settings.cors_origins)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    def check_code(stage: str, req_id: str, code: int) -> None:
        if settings.min_code <= code <= settings.max_code:
            return
        _log(stage, "invalid", req_id, code=mask_code(code), level=logging.WARNING)
        abort(
            400,
            f"Code must be a {settings.min_digits}-{settings.max_digits} digit number",
        )

    @app.post("/codes")
    def issue_code():
        payload = IssueRequest.model_validate(request.get_json(silent=True) or {})
        req_id = secrets.token_hex(4)
        _log("issue", "start", req_id, code=mask_code(payload.code))
        check_code("issue", req_id, payload.code)
        existed = store.issue(payload.code, payload.duration_ms)
        result = IssueResult(
            code=payload.code,
            existed=existed,
            outcome=IssueOutcome.from_existed(existed),
        )
        _log("issue", "success", req_id, code=mask_code(payload.code), outcome=result.outcome.value)
        message = "Code duration updated" if existed else "Code issued"
        return jsonify(
            ServiceResponse(success=True, message=message, data=result.model_dump(mode="json")).model_dump()
        )

    @app.post("/codes/redeem")
    def redeem_code():
        payload = RedeemRequest.model_validate(request.get_json(silent=True) or {})
        req_id = secrets.token_hex(4)
        _log("redeem", "start", req_id, code=mask_code(payload.code))
        check_code("redeem", req_id, payload.code)
        accepted = store.redeem(payload.code)
        result = RedeemResult(code=payload.code, accepted=accepted)
        if not accepted:
            _log("redeem", "rejected", req_id, code=mask_code(payload.code), level=logging.WARNING)
            return jsonify(
                ServiceResponse(success=True, message=REJECTED_MESSAGE, data=result.model_dump()).model_dump()
            )
        _log("redeem", "accepted", req_id, code=mask_code(payload.code))
        return jsonify(
            ServiceResponse(success=True, message="Code accepted", data=result.model_dump()).model_dump()
        )

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        fields = ", ".join(".".join(str(part) for part in err["loc"]) or "body" for err in error.errors())
        return (
            jsonify(
                ServiceResponse(success=False, message=f"Invalid request: {fields}").model_dump()
            ),
            400,
        )

    @app.errorhandler(400)
    def handle_bad_request(error):
        message = getattr(error, "description", "Bad Request")
        return (
            jsonify(
                ServiceResponse(success=False, message=message).model_dump()
            ),
            400,
        )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
