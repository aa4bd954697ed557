"""
AUTHENTICATOR API ROUTES - FLASK BLUEPRINT

JSON endpoints over the MobileAuthenticator registered on the app.

EXAMPLES:
curl http://localhost:5000/api/token
curl http://localhost:5000/api/confirmations
curl http://localhost:5000/api/confirmations/123/456
curl -X POST http://localhost:5000/api/confirmations/123/456 -H "Content-Type: application/json" -d '{"accept": true}'
curl -X POST http://localhost:5000/api/confirmations -H "Content-Type: application/json" \
     -d '{"accept": false, "confirmations": [{"id": 123, "key": 456}]}'
"""

from flask import Blueprint, current_app, jsonify, request

from authenticator.confirmations import Confirmation
from authenticator.log_handler import log

authenticator_bp = Blueprint('authenticator', __name__, url_prefix='/api')


def _authenticator():
    return current_app.extensions['authenticator']


def _accept_flag():
    data = request.get_json(silent=True) or {}
    accept = data.get('accept')
    if not isinstance(accept, bool):
        return None, data
    return accept, data


def _json_int(value):
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected an integer, got {value!r}")
    return value


def _confirmation(confirmation_id, confirmation_key):
    try:
        return Confirmation(confirmation_id, confirmation_key)
    except ValueError:
        return None


@authenticator_bp.route('/token', methods=['GET'])
async def token():
    code = await _authenticator().generate_token()
    if code is None:
        return jsonify({"error": "Server time unavailable"}), 503
    return jsonify({"code": code})


@authenticator_bp.route('/confirmations', methods=['GET'])
async def list_confirmations():
    confirmations = await _authenticator().get_confirmations()
    if confirmations is None:
        return jsonify({"error": "Could not fetch confirmations"}), 502

    ordered = sorted(confirmations, key=lambda c: (c.id, c.key))
    return jsonify({"confirmations": [c.to_dict() for c in ordered]})


@authenticator_bp.route('/confirmations/<int:confirmation_id>/<int:confirmation_key>', methods=['GET'])
async def confirmation_details(confirmation_id, confirmation_key):
    confirmation = _confirmation(confirmation_id, confirmation_key)
    if confirmation is None:
        return jsonify({"error": "Confirmation id and key must be positive 32-bit and 64-bit values"}), 400

    details = await _authenticator().get_confirmation_details(confirmation)
    if details is None:
        return jsonify({"error": "Could not fetch confirmation details"}), 502
    return jsonify({"details": details})


@authenticator_bp.route('/confirmations/<int:confirmation_id>/<int:confirmation_key>', methods=['POST'])
async def resolve_confirmation(confirmation_id, confirmation_key):
    confirmation = _confirmation(confirmation_id, confirmation_key)
    if confirmation is None:
        return jsonify({"error": "Confirmation id and key must be positive 32-bit and 64-bit values"}), 400

    accept, _ = _accept_flag()
    if accept is None:
        return jsonify({"error": "Boolean 'accept' is required"}), 400

    success = await _authenticator().handle_confirmation(confirmation, accept)
    log.debug("Confirmation %d %s: %s", confirmation.id, "accepted" if accept else "denied", success)
    return jsonify({"success": success}), 200 if success else 502


@authenticator_bp.route('/confirmations', methods=['POST'])
async def resolve_confirmations():
    accept, data = _accept_flag()
    if accept is None:
        return jsonify({"error": "Boolean 'accept' is required"}), 400

    items = data.get('confirmations')
    if not isinstance(items, list) or not items:
        return jsonify({"error": "Non-empty 'confirmations' list is required"}), 400

    try:
        confirmations = [Confirmation(_json_int(item['id']), _json_int(item['key'])) for item in items]
    except (KeyError, TypeError, ValueError):
        return jsonify({"error": "Every confirmation needs an integer id and key in range"}), 400

    success = await _authenticator().handle_confirmations(confirmations, accept)
    return jsonify({"success": success, "count": len(confirmations)}), 200 if success else 502
