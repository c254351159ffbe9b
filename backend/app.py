"""
FLASK API SERVER
----------------
Serves as the backend API for the environmental dashboard.

Exposes endpoints that:
- Report, download and clear the boundary datasets
- Serve filtered, simplified boundary GeoJSON to the frontend
- Report the current data version for client cache invalidation

This file does not do data logic directly.
it wires the services in boundary_api/ together and turns their
results and errors into JSON responses.
"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from boundary_api.boundary_service import BoundaryService
from boundary_api.cache_service import CacheService
from boundary_api.config import ServerConfig
from boundary_api.data_service import DataService
from boundary_api.errors import BoundaryApiError


def create_app(config=None, datasets=None, session=None):
    config = config or ServerConfig.from_env()

    app = Flask(__name__)
    CORS(app, origins=config.cors_origins)

    # one cache per process, shared by both services
    cache = CacheService()
    data_service = DataService(config, cache, datasets=datasets, session=session)
    boundary_service = BoundaryService(config, cache, datasets=datasets)

    app.extensions["boundary_api"] = {
        "config": config,
        "cache": cache,
        "data": data_service,
        "boundaries": boundary_service,
    }

    def _server_error(message, exc):
        app.logger.exception("%s: %s", message, exc)
        return jsonify({
            "success": False,
            "message": message,
            "error": str(exc) if config.debug else "Something went wrong",
        }), 500

    @app.errorhandler(BoundaryApiError)
    def handle_api_error(exc):
        return jsonify(exc.to_payload()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({"success": False, "message": exc.description}), exc.code

    @app.route("/api/health")
    def health():
        return jsonify(success=True, status="ok")

    @app.get("/api/boundaries/<level>")
    @app.get("/api/boundaries/<level>/<parent_code>")
    def api_boundaries(level, parent_code=None):
        try:
            result = boundary_service.get_boundaries(level, parent_code)
        except BoundaryApiError:
            raise
        except Exception as exc:
            return _server_error("Failed to serve boundary data", exc)
        return jsonify({"success": True, **result})

    @app.get("/api/data/status/<dataset_key>")
    def api_data_status(dataset_key):
        app.logger.info("Getting status for %s", dataset_key)
        try:
            downloaded = data_service.is_downloaded(dataset_key)
        except BoundaryApiError:
            raise
        except Exception as exc:
            return _server_error("Failed to check data status", exc)
        return jsonify({"success": True, "dataset": dataset_key, "status": downloaded})

    @app.post("/api/data/download/<dataset_key>")
    def api_data_download(dataset_key):
        try:
            report = data_service.download(dataset_key)
        except BoundaryApiError:
            raise
        except Exception as exc:
            return _server_error("Download failed", exc)

        payload = {
            "success": report.success,
            "dataset": report.dataset,
            "message": report.message,
            "results": [r.model_dump(exclude_none=True) for r in report.results],
        }
        return jsonify(payload), (200 if report.success else 500)

    @app.delete("/api/data/files")
    def api_data_clear():
        try:
            results = data_service.clear_files()
        except Exception as exc:
            return _server_error("Failed to clear files", exc)
        return jsonify({"success": True, "message": "All files cleared", "results": results})

    @app.get("/api/data/version")
    def api_data_version():
        return jsonify({
            "success": True,
            "version": cache.data_version,
            "files": cache.get_all_file_hashes(),
        })

    return app


app = create_app()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    cfg = app.extensions["boundary_api"]["config"]
    app.logger.info("Environmental Dashboard API running on port %s", cfg.port)
    app.run(host="0.0.0.0", port=cfg.port, debug=cfg.debug)
