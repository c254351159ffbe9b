"""
API ERRORS
----------
Exceptions raised by the services and turned into JSON error
envelopes by the Flask layer (see app.py).
"""

from __future__ import annotations


class BoundaryApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"success": False, "message": self.message}


class InvalidParameterError(BoundaryApiError):
    status_code = 400


class UnknownDatasetError(BoundaryApiError):
    status_code = 400

    def __init__(self, dataset_key: str):
        super().__init__(f"Unknown dataset: {dataset_key}")
        self.dataset_key = dataset_key


class DataNotFoundError(BoundaryApiError):
    status_code = 404
