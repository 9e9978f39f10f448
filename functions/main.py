# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

# Cloud function packaging of the Memory Box API.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.
#
# The request handling logic lives in backend.service and is shared with the
# standalone FastAPI server; this module only routes HTTP requests to it.

# Standard library imports
import json
import traceback

# Third-party library imports
from firebase_admin import initialize_app
from firebase_functions import https_fn, logger, options
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound
from werkzeug.routing import Map, Rule

# Local application imports
from backend.config import get_settings
from backend.dependencies import get_auth_service, get_memory_service
from backend.errors import ServiceError
from backend.service import PhotoUpload
from shared.constants import MSG_UNEXPECTED

initialize_app()

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]

_ROUTES = [
    ("/health", "health", ["GET"]),
    ("/auth/login", "login", ["POST"]),
    ("/auth/register", "register", ["POST"]),
    ("/memories/<group_id>", "list_memories", ["GET"]),
    ("/memories/<group_id>", "create_memory", ["POST"]),
    ("/memories/<group_id>/<memory_id>", "get_memory", ["GET"]),
    ("/memories/<group_id>/<memory_id>", "delete_memory", ["DELETE"]),
]


def _build_url_map(api_prefix: str) -> Map:
    """
    Routes are reachable both with the API prefix (Firebase Hosting rewrites
    keep the full path) and without it (direct function URLs).
    """
    rules = []
    for prefix in {"", api_prefix.rstrip("/")}:
        for path, endpoint, methods in _ROUTES:
            rules.append(Rule(prefix + path, endpoint=endpoint, methods=methods))
    return Map(rules)


_URL_MAP = _build_url_map(get_settings().api_prefix)


def _json_response(body, status: int = 200) -> https_fn.Response:
    return https_fn.Response(
        json.dumps(body, ensure_ascii=False),
        status=status,
        mimetype="application/json",
    )


def _read_photo(req: https_fn.Request, max_bytes: int) -> PhotoUpload | None:
    photo = req.files.get("photo")
    if photo is None:
        return None
    return PhotoUpload(
        data=photo.read(max_bytes + 1),
        content_type=photo.mimetype,
        filename=photo.filename,
    )


def _dispatch(req: https_fn.Request, endpoint: str, values: dict):
    """Calls the service for a matched route. Returns (body, status)."""
    if endpoint == "health":
        return {"status": "ok"}, 200
    if endpoint == "login":
        result = get_auth_service().login(req.get_json(silent=True))
        return result.to_json(), 200
    if endpoint == "register":
        result = get_auth_service().register(req.get_json(silent=True))
        return result.to_json(), 201

    service = get_memory_service()
    group_id = values["group_id"]
    if endpoint == "list_memories":
        return [record.to_json() for record in service.list_memories(group_id)], 200
    if endpoint == "create_memory":
        form = {
            "title": req.form.get("title"),
            "description": req.form.get("description"),
            "date": req.form.get("date"),
        }
        photo = _read_photo(req, service.max_photo_bytes)
        return service.create_memory(group_id, form, photo).to_json(), 201
    if endpoint == "get_memory":
        return service.get_memory(group_id, values["memory_id"]).to_json(), 200
    if endpoint == "delete_memory":
        return service.delete_memory(group_id, values["memory_id"]), 200
    raise ValueError(f"Unrouted endpoint: {endpoint}")


@https_fn.on_request(
    memory=options.MemoryOption.MB_512,
    cors=options.CorsOptions(
        cors_origins=get_settings().cors_origins,
        cors_methods=CORS_METHODS,
    ),
)
def api(req: https_fn.Request) -> https_fn.Response:
    """
    Serves the Memory Box REST API (auth and memories) as one HTTPS function.

    Args:
        req (https_fn.Request): The incoming Flask request.

    Returns:
        A JSON response.
    """
    try:
        endpoint, values = _URL_MAP.bind_to_environ(req.environ).match()
    except (NotFound, MethodNotAllowed) as e:
        return _json_response({"error": e.name}, status=e.code)
    except HTTPException as e:
        return e.get_response(req.environ)

    try:
        body, status = _dispatch(req, endpoint, values)
    except ServiceError as e:
        return _json_response(e.to_dict(), status=e.status_code)
    except Exception as e:
        logger.error(
            f"Unhandled error on {req.method} {req.path}: {e}\n{traceback.format_exc()}"
        )
        return _json_response({"error": MSG_UNEXPECTED}, status=500)
    return _json_response(body, status=status)
