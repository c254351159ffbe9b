"""
DATASET FETCHER
---------------
Downloads the files of a registered dataset into the data directory.

Responsible for:
- Reporting whether every file of a dataset is present (existence only)
- Downloading missing files once, keeping files that already exist
- Clearing every declared file of every dataset

A file that exists on disk counts as downloaded; it is never compared
against its source again. Re-downloading means deleting it first (see
clear_files). Each file's check-then-fetch runs under a FileLock, so two
requests downloading the same dataset do not both fetch the same file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Mapping

import requests
from filelock import FileLock
from pydantic import BaseModel

from .cache_service import CacheService
from .config import ServerConfig
from .datasets import DATASETS, DatasetDescriptor, DownloadResource, get_dataset

logger = logging.getLogger(__name__)


class FileResult(BaseModel):
    filename: str
    status: Literal["already_exists", "downloaded", "error"]
    hash: str | None = None
    error: str | None = None


class DownloadReport(BaseModel):
    dataset: str
    results: list[FileResult] = []

    @property
    def errors(self) -> list[FileResult]:
        return [r for r in self.results if r.status == "error"]

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        if self.success:
            return f"Successfully processed {len(self.results)} files"
        return f"Failed to download {len(self.errors)} files"


class DataService:
    def __init__(
        self,
        config: ServerConfig,
        cache: CacheService,
        datasets: Mapping[str, DatasetDescriptor] | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config
        self.cache = cache
        self.datasets = DATASETS if datasets is None else datasets
        self.session = session if session is not None else requests.Session()

    # path helpers
    def file_path(self, filename: str) -> Path:
        return self.config.data_dir / filename

    def lock_path(self, filename: str) -> Path:
        # one lock per stored file
        d = self.config.lock_dir
        d.mkdir(parents=True, exist_ok=True)
        return d / f"{filename}.lock"

    def ensure_data_dir(self) -> Path:
        self.config.data_dir.mkdir(parents=True, exist_ok=True)
        return self.config.data_dir

    def status(self, dataset_key: str) -> dict[str, bool]:
        """Map each stored filename of the dataset to whether it exists."""
        dataset = get_dataset(dataset_key, self.datasets)
        return {name: self.file_path(name).is_file() for name in dataset.stored_filenames()}

    def is_downloaded(self, dataset_key: str) -> bool:
        return all(self.status(dataset_key).values())

    def download(self, dataset_key: str) -> DownloadReport:
        dataset = get_dataset(dataset_key, self.datasets)
        logger.info("Starting %s data download", dataset_key)
        self.ensure_data_dir()

        report = DownloadReport(dataset=dataset_key)
        for resource in dataset.downloads:
            report.results.append(self._download_one(dataset, resource))

        if report.success:
            logger.info("%s: %s", dataset_key, report.message)
        else:
            logger.warning("%s: %s", dataset_key, report.message)
        return report

    def _download_one(self, dataset: DatasetDescriptor, resource: DownloadResource) -> FileResult:
        filename = dataset.stored_filename(resource)
        path = self.file_path(filename)

        try:
            with FileLock(str(self.lock_path(filename))):
                if path.exists():
                    existing_hash = self.cache.update_file_hash(filename, path.read_bytes())
                    return FileResult(filename=filename, status="already_exists", hash=existing_hash)

                logger.info("Downloading %s to %s", resource.url, filename)
                resp = self.session.get(resource.url, timeout=self.config.download_timeout)
                resp.raise_for_status()
                data = resp.content

                tmp = path.with_name(path.name + ".tmp")
                try:
                    tmp.write_bytes(data)
                    os.replace(tmp, path)
                finally:
                    # no-op once replaced
                    tmp.unlink(missing_ok=True)

                new_hash = self.cache.update_file_hash(filename, data)
                logger.info("Successfully downloaded %s", filename)
                return FileResult(filename=filename, status="downloaded", hash=new_hash)

        except (requests.RequestException, OSError) as exc:
            logger.error("Failed to download %s: %s", filename, exc)
            return FileResult(filename=filename, status="error", error=str(exc))

    def clear_files(self) -> list[dict]:
        """Delete every declared file of every dataset and reset the cache."""
        results = []
        for dataset in self.datasets.values():
            for filename in dataset.stored_filenames():
                with FileLock(str(self.lock_path(filename))):
                    try:
                        self.file_path(filename).unlink()
                        results.append({"filename": filename, "deleted": True})
                    except FileNotFoundError:
                        results.append({"filename": filename, "deleted": False, "error": "File not found"})
                    except OSError as exc:
                        logger.warning("Failed to delete %s: %s", filename, exc)
                        results.append({"filename": filename, "deleted": False, "error": str(exc)})

        self.cache.clear()
        logger.info("Cleared %d files", sum(r["deleted"] for r in results))
        return results
