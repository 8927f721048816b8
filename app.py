import logging
import os

from flask import Flask, jsonify, request

from unfurl import InvalidTarget, unfurl

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "no-store, max-age=0"}

DEBUG = os.environ.get("FLASK_DEBUG", "0").lower() in ("1", "true")

app = Flask(__name__)
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev')


@app.get("/healthz")
def healthz():
    return "ok", 200


@app.get("/api/unfurl")
def unfurl_link():
    raw = request.args.get('url', '').strip()
    if not raw:
        return jsonify(error="missing url"), 400, NO_STORE

    try:
        data = unfurl(raw)
    except InvalidTarget as e:
        logger.info("rejected unfurl target %r: %s", raw, e)
        return jsonify(error=str(e)), 400, NO_STORE
    except Exception:
        logger.exception("unfurl failed for %r", raw)
        return jsonify(error="unfurl error"), 500, NO_STORE

    return jsonify(data=data.to_dict()), 200, NO_STORE


if __name__ == '__main__':
    app.run(debug=DEBUG, host='0.0.0.0', port=8080)
