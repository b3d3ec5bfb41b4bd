"""WSGI entrypoint.

    gunicorn pi_relay.wsgi:app
    python -m pi_relay.wsgi
"""

from pi_relay.app import create_app
from pi_relay.config import config

app = create_app(config)


if __name__ == "__main__":
    app.run(host=config.HOST, port=config.PORT, debug=config.IS_DEV)
