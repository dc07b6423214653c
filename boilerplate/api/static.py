"""Static file serving that tells the access log how large the served file is."""
from __future__ import annotations

import os

from starlette.responses import FileResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

from boilerplate.core.access_log import STATIC_FILE_SIZE_KEY


class SizedStaticFiles(StaticFiles):
    """StaticFiles that stores the file size under ``scope["state"]`` for ``:bytes-sent``."""

    def file_response(
        self,
        full_path: "str | os.PathLike[str]",
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        response = super().file_response(full_path, stat_result, scope, status_code)
        if isinstance(response, FileResponse):
            scope.setdefault("state", {})[STATIC_FILE_SIZE_KEY] = stat_result.st_size
        return response
