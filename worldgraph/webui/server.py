# worldgraph/webui/server.py

# HTTP transport for the World Graph pipeline.
# POST /wander resolves a pair, GET /explore lists every stored fact, and any
# other GET is served from the static asset directory.

import http.server
import json
import logging
import os
import urllib.parse
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from worldgraph.errors import WorldGraphError
from worldgraph.models import Pair

logger = logging.getLogger(__name__)


class WorldGraphRequestHandler(http.server.SimpleHTTPRequestHandler):
    """HTTP handler bound to one shared ``WorldGraph`` instance."""

    def __init__(self, *args, graph=None, public_dir: Optional[str] = None, **kwargs):
        self.graph = graph
        self.public_dir = public_dir
        directory = public_dir if public_dir and os.path.isdir(public_dir) else None
        super().__init__(*args, directory=directory, **kwargs)

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)

    def end_headers(self):
        self.send_header("Access-Control-Allow-Origin", "*")
        super().end_headers()

    def do_OPTIONS(self):
        self.send_response(204)
        self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type")
        self.end_headers()

    def do_GET(self):
        parsed_url = urllib.parse.urlparse(self.path)

        if parsed_url.path == "/explore":
            return self.handle_explore()

        if not self.public_dir or not os.path.isdir(self.public_dir):
            return self.send_json_response({"error": "Not found"}, status=404)

        if parsed_url.path == "/":
            self.path = "/index.html"

        return http.server.SimpleHTTPRequestHandler.do_GET(self)

    def do_POST(self):
        parsed_url = urllib.parse.urlparse(self.path)
        if parsed_url.path == "/wander":
            return self.handle_wander()
        return self.send_json_response({"error": "Not found"}, status=404)

    def handle_wander(self):
        try:
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length)
            pair = Pair.model_validate_json(body)
        except (ValueError, ValidationError) as exc:
            logger.warning("Rejected /wander request: %s", exc)
            return self.send_json_response({"error": f"Invalid request: {exc}"}, status=400)

        try:
            triple = self.graph.resolve(pair.a, pair.b)
        except WorldGraphError as exc:
            logger.error("%s", exc)
            return self.send_json_response({"error": str(exc)}, status=500)

        return self.send_json_response(triple.model_dump())

    def handle_explore(self):
        try:
            triples = self.graph.explore()
        except WorldGraphError as exc:
            logger.error("%s", exc)
            return self.send_json_response({"error": str(exc)}, status=500)
        return self.send_json_response([t.model_dump() for t in triples])

    def send_json_response(self, data: Any, status: int = 200):
        payload = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)


# Factory that injects the shared pipeline into each handler instance.
def create_handler_factory(graph, public_dir: Optional[str] = None):
    def handler_factory(*args, **kwargs):
        return WorldGraphRequestHandler(*args, graph=graph, public_dir=public_dir, **kwargs)
    return handler_factory


class ReusableHTTPServer(http.server.ThreadingHTTPServer):
    allow_reuse_address = True
    daemon_threads = True


def create_server(graph, host: str = "0.0.0.0", port: int = 3000, public_dir: Optional[str] = None):
    if public_dir:
        public_dir = str(Path(public_dir).resolve())
    return ReusableHTTPServer((host, port), create_handler_factory(graph, public_dir))


def start_server(graph, port: int, public_dir: Optional[str] = None):
    with create_server(graph, port=port, public_dir=public_dir) as httpd:
        host, bound_port = httpd.server_address[:2]
        print(f"[*] World Graph listening on http://{host}:{bound_port}")
        if public_dir:
            print(f"    Serving static assets from: {public_dir}")
        httpd.serve_forever()
