"""
FLASK APP FACTORY - AUTHENTICATOR API SERVER

Wraps one MobileAuthenticator in a small JSON API. The transport that talks
to the platform (the ConfirmationService) is supplied by the caller, so the
app itself has no network configuration of its own.
"""

from flask import Flask, jsonify
from flask_cors import CORS

from authenticator_api.routes import authenticator_bp


def create_app(authenticator, config=None) -> Flask:
    app = Flask(__name__)
    if config:
        app.config.update(config)

    # Let a frontend served from another origin call the API
    CORS(app)

    app.extensions['authenticator'] = authenticator
    app.register_blueprint(authenticator_bp)

    @app.route('/', methods=['GET'])
    def index():
        return jsonify({
            "service": "authenticator",
            "has_device_id": authenticator.has_device_id,
            "endpoints": [
                "GET /api/token",
                "GET /api/confirmations",
                "GET /api/confirmations/<id>/<key>",
                "POST /api/confirmations/<id>/<key>",
                "POST /api/confirmations",
            ],
        })

    return app
