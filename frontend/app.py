# frontend/app.py

import logging

from flask import Flask, jsonify

from frontend.api import api_blueprint

app = Flask(__name__)
app.register_blueprint(api_blueprint, url_prefix="/api")


@app.route("/")
def index():
    return jsonify({"service": "audit_sweeper", "api": "/api"})


def main():
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument("--port", type=int, default=5000, help="Port to run the server on")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Host IP")
    parser.add_argument("--section", type=str, default="default", help="Config section in backend/config.yaml")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    app.config["GAME_CONFIG_SECTION"] = args.section

    print(f"Running on http://{args.host}:{args.port}/")
    # timers live in this process only
    app.run(debug=args.debug, host=args.host, port=args.port, use_reloader=False)


if __name__ == "__main__":
    main()
