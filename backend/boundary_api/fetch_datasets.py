"""
DATASET DOWNLOAD SCRIPT
-----------------------
Warms the data directory without going through the web API.

Downloads every file of the requested datasets (all datasets by
default), or reports their status, or clears every stored file.
Uses the same services and paths as the API server, so files written
here are picked up by the server as-is.
"""

from __future__ import annotations

import argparse

from .cache_service import CacheService
from .config import ServerConfig
from .data_service import DataService
from .datasets import DATASETS
from .errors import UnknownDatasetError


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Download, check or clear boundary datasets")
    ap.add_argument("--dataset", action="append", default=[], help="Dataset key (repeatable). Default: all")
    ap.add_argument("--status", action="store_true", help="Only report whether files are present")
    ap.add_argument("--clear", action="store_true", help="Delete every downloaded file")
    args = ap.parse_args(argv)

    service = DataService(ServerConfig.from_env(), CacheService())

    if args.clear:
        results = service.clear_files()
        for r in results:
            print(f"  {r['filename']}: {'deleted' if r['deleted'] else r.get('error', 'not deleted')}")
        print(f"Cleared {sum(r['deleted'] for r in results)} files.")
        return 0

    keys = args.dataset or list(DATASETS)
    failed = False
    try:
        for key in keys:
            if args.status:
                files = service.status(key)
                print(f"{key}: {'complete' if all(files.values()) else 'incomplete'}")
                for name, present in files.items():
                    print(f"  {name}: {'present' if present else 'missing'}")
                continue

            print(f"Downloading {key}…")
            report = service.download(key)
            for r in report.results:
                detail = r.hash if r.status != "error" else r.error
                print(f"  {r.filename}: {r.status} ({detail})")
            print(f"  {report.message}")
            failed = failed or not report.success
    except UnknownDatasetError as exc:
        print(f"ERROR: {exc.message}")
        return 2

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
