"""Routes for the auth blueprint.

Sign-in itself happens in the Firebase client SDK; these endpoints only turn
a verified ID token into a server-side session.
"""

from firebase_admin import auth
from flask import current_app, jsonify, request, session
from flask_wtf.csrf import generate_csrf

from tourneyhub.extensions import csrf

from . import bp


@bp.route("/session_login", methods=["POST"])
@csrf.exempt
def session_login():
    """Verify a Firebase ID token and remember the identity in the session."""
    id_token = (request.get_json(silent=True) or {}).get("idToken")
    if not id_token:
        return jsonify({"status": "error", "message": "Missing idToken."}), 400
    try:
        decoded_token = auth.verify_id_token(id_token)
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, ValueError) as e:
        current_app.logger.warning(f"Rejected session login: {e}")
        return jsonify({"status": "error", "message": "Invalid token."}), 401

    session["user_id"] = decoded_token["uid"]
    session["email"] = decoded_token.get("email")
    current_app.logger.info(f"Session started for {decoded_token['uid']}")
    return jsonify({"status": "success"})


@bp.route("/logout", methods=["POST"])
def logout():
    """Clear the server-side session."""
    session.clear()
    return jsonify({"status": "success"})


@bp.route("/csrf_token", methods=["GET"])
def csrf_token():
    """Token for the X-CSRFToken header on later POSTs."""
    return jsonify({"csrfToken": generate_csrf()})
