"""WSGI entry point for the scrape and sync API."""

import os

from nosjoueurs import create_app

app = create_app()
app.logger.setLevel(os.environ.get("LOG_LEVEL", "INFO"))


@app.route("/health")
def health_check():
    """Report that the API process is up."""
    return {"status": "ok", "ffeHost": app.config["FFE_HOST"]}, 200


if __name__ == "__main__":
    port = int(os.environ.get("PORT") or 3000)
    app.run(debug=True, host="0.0.0.0", port=port)  # nosec
