"""Local/WSGI entrypoint.

Platforms that auto-detect Flask look for an `app` object in `main.py`.
"""

from rifazo import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=8000, debug=False)
