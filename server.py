"""Flask API exposing the signing service."""

from logger import get_logger
from threading import Thread

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config_loader import ServiceConfig
from errors import KeyFileMalformed, KeyFileUnreadable, MalformedRequest
from metrics import get_metrics
from signing_service import SignRequest, SigningService


class SigningServer(Thread):
    """Threaded Flask server running in a background thread."""

    def __init__(self, service: SigningService, config: ServiceConfig):
        super().__init__(daemon=True)
        self.service = service
        self.config = config
        self.metrics = get_metrics()
        self.app = Flask(__name__)
        self.logger = get_logger(__name__)
        self._setup_cors()
        self._setup_routes()

    def _setup_cors(self):
        origins = "*" if self.config.any_origin else list(self.config.allowed_origins)
        CORS(self.app, resources={r"/sign": {"origins": origins}}, methods=["POST"])

    def _setup_routes(self):
        @self.app.route("/sign", methods=["POST"])
        def sign():
            sign_request = SignRequest.from_json(request.get_json(force=True, silent=True))
            response = self.service.handle(sign_request)
            self.metrics.record_signed()
            return jsonify(response.to_json())

        @self.app.route("/healthz")
        def healthz():
            ok = self.service.key_store.exists()
            if not ok:
                self.logger.warning("Health check failed: private key file missing")
            payload = {"status": "ok" if ok else "error", **self.metrics.snapshot()}
            return jsonify(payload), 200 if ok else 503

        @self.app.after_request
        def log_request(response):
            self.logger.info(
                '%s "%s %s" %s',
                request.remote_addr,
                request.method,
                request.path,
                response.status_code,
            )
            return response

        @self.app.errorhandler(MalformedRequest)
        def handle_malformed(exc: MalformedRequest):
            self.metrics.record_client_error()
            self.logger.warning("Rejected request from %s: %s", request.remote_addr, exc)
            return jsonify({"error": "malformed request"}), 400

        @self.app.errorhandler(KeyFileUnreadable)
        @self.app.errorhandler(KeyFileMalformed)
        def handle_key_error(exc: Exception):
            self.metrics.record_server_error()
            self.logger.error("Signing failed: %s", exc)
            return jsonify({"error": "signing unavailable"}), 500

        @self.app.errorhandler(Exception)
        def handle_exception(exc: Exception):
            if isinstance(exc, HTTPException):
                return exc
            self.metrics.record_server_error()
            self.logger.exception("Unhandled error: %s", exc)
            return jsonify({"error": "internal server error"}), 500

    def run(self):
        self.logger.info(
            "Signing Server starting on http://%s:%s/sign",
            self.config.bind_to,
            self.config.port,
        )
        self.app.run(host=self.config.bind_to, port=self.config.port, threaded=True)
