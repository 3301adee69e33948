"""Local webhook runner for development and testing.

This Flask application mimics the API Gateway + Lambda integration used
in production. It loads environment variables from a `.env` file (via
python-dotenv) and wires up the same handlers used in
`clothcheck/lambda_function.py`. You can point a LINE channel's webhook
URL at `/webhook` through a tunnel, or post a webhook JSON body yourself.

Run with:

```bash
pip install -e .
python local_runner.py
```

Then send a POST request to http://localhost:5000/webhook with a body
such as `{"events": [{"type": "message", ...}]}`.
"""

from __future__ import annotations

import logging

from flask import Flask, Response, jsonify, request
from dotenv import load_dotenv

from clothcheck.config import load_settings
from clothcheck.dependencies import build_dependencies
from clothcheck.handlers import dispatch_events

# Load environment from .env if present
load_dotenv()

settings = load_settings()
logging.basicConfig(level=settings.log_level)

app = Flask(__name__)

deps = build_dependencies(settings)


@app.route('/webhook', methods=['POST'])
def webhook() -> Response:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not isinstance(payload.get('events', []), list):
        return Response('Invalid webhook body', status=400)

    dispatch_events(deps, payload.get('events', []))
    return jsonify('OK')


if __name__ == '__main__':
    app.run(port=5000, debug=True)
