"""Development server for the static site tree.

Serves ``public/`` from the working directory on the port given as the only
argument. Every response is marked cacheable for five minutes, textual
content is compressed when the client accepts it, and each request is logged
together with its full request and response headers.
"""

from __future__ import annotations

import argparse
import functools
import gzip
import logging
import os
import re
import sys
import zlib
from datetime import UTC, datetime
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from io import BytesIO
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

logger = logging.getLogger(__name__)
access_logger = logging.getLogger(f"{__name__}.access")

DEFAULT_ROOT = Path("public")
CACHE_MAX_AGE = 5 * 60
CACHE_CONTROL = f"public, max-age={CACHE_MAX_AGE}"
COMPRESSIBLE_TYPES = re.compile(r"json|text|javascript|font")
SUPPORTED_ENCODINGS = ("gzip", "deflate")
INDEX_FILES = ("index.html",)


def _now() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_compressible(content_type: str | None) -> bool:
    return bool(COMPRESSIBLE_TYPES.search(content_type or ""))


def parse_accept_encoding(header: str | None) -> dict[str, float]:
    """Map each coding listed in an Accept-Encoding header to its q-value."""
    weights: dict[str, float] = {}
    for part in (header or "").split(","):
        coding, _, params = part.partition(";")
        coding = coding.strip().lower()
        if not coding:
            continue
        quality = 1.0
        for param in params.split(";"):
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        weights[coding] = quality
    return weights


def negotiate_encoding(header: str | None) -> str | None:
    """Pick the supported coding the client prefers, or None to send as is."""
    weights = parse_accept_encoding(header)
    fallback = weights.get("*", 0.0)
    chosen, best = None, 0.0
    for coding in SUPPORTED_ENCODINGS:
        quality = weights.get(coding, fallback)
        if quality > best:
            chosen, best = coding, quality
    return chosen


def compress(body: bytes, coding: str) -> bytes:
    if coding == "gzip":
        return gzip.compress(body, mtime=0)
    if coding == "deflate":
        return zlib.compress(body)
    raise ValueError(f"Unsupported content coding: {coding}")


class StaticAssetHandler(SimpleHTTPRequestHandler):
    server_version = "EarthDevServer/0.1"

    extensions_map = {
        **SimpleHTTPRequestHandler.extensions_map,
        ".js": "application/javascript",
        ".json": "application/json",
        # Cloudflare compresses font/ttf but not application/x-font-ttf.
        ".ttf": "font/ttf",
        ".woff": "font/woff",
        ".woff2": "font/woff2",
    }

    def send_head(self):
        path = self.translate_path(self.path)
        if os.path.isdir(path):
            parts = urlsplit(self.path)
            if not parts.path.endswith("/"):
                self.send_response(HTTPStatus.MOVED_PERMANENTLY)
                self.send_header(
                    "Location", urlunsplit(parts._replace(path=parts.path + "/"))
                )
                self.send_header("Content-Length", "0")
                self.end_headers()
                return None
            for index in INDEX_FILES:
                candidate = os.path.join(path, index)
                if os.path.isfile(candidate):
                    path = candidate
                    break
            else:
                return self.list_directory(path)

        if not os.path.isfile(path):
            self.send_error(HTTPStatus.NOT_FOUND, "File not found")
            return None
        try:
            with open(path, "rb") as f:
                body = f.read()
        except OSError:
            self.send_error(HTTPStatus.NOT_FOUND, "File not found")
            return None

        content_type = self.guess_type(path)
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", content_type)
        if is_compressible(content_type):
            self.send_header("Vary", "Accept-Encoding")
            coding = negotiate_encoding(self.headers.get("Accept-Encoding"))
            if coding:
                body = compress(body, coding)
                self.send_header("Content-Encoding", coding)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        return BytesIO(body)

    def list_directory(self, path):
        self.send_error(HTTPStatus.NOT_FOUND, "File not found")
        return None

    def end_headers(self):
        self.send_header("Cache-Control", CACHE_CONTROL)
        self.log_access()
        super().end_headers()

    def _request_header(self, name: str) -> str:
        headers = getattr(self, "headers", None)
        value = headers.get(name) if headers is not None else None
        return value or "-"

    def access_line(self) -> str:
        version = (getattr(self, "request_version", None) or "").removeprefix("HTTP/") or "-"
        command = getattr(self, "command", None) or "-"
        return (
            f"{_now()} - info: {self.client_address[0]} "
            f"{self._request_header('CF-Connecting-IP')} {self._request_header('CF-IPCountry')} "
            f"{command} {getattr(self, 'path', None) or '-'} HTTP/{version} "
            f'"{self._request_header("User-Agent")}" {self._request_header("Referer")} '
            f"{self._request_header('CF-Ray')} {self._request_header('Accept-Encoding')}"
        )

    def log_access(self) -> None:
        headers = getattr(self, "headers", None)
        request_block = str(headers).strip() if headers is not None else ""
        # _headers_buffer holds the status line and every header queued so far.
        response_block = (
            b"".join(getattr(self, "_headers_buffer", [])).decode("latin-1").strip()
        )
        access_logger.info("%s\n%s\n\n%s\n", self.access_line(), request_block, response_block)

    def log_request(self, code="-", size="-"):
        # Covered by log_access once the response headers are complete.
        pass

    def log_error(self, format, *args):
        logger.warning("%s - %s", self.address_string(), format % args)

    def log_message(self, format, *args):
        logger.info("%s - %s", self.address_string(), format % args)


class DevServer(ThreadingHTTPServer):
    daemon_threads = True

    def handle_error(self, request, client_address):
        logger.exception("Error while handling request from %s", client_address[0])


def make_server(root: str | Path, port: int, host: str = "") -> DevServer:
    """Bind a server for ``root``; binding errors propagate to the caller."""
    handler = functools.partial(StaticAssetHandler, directory=str(root))
    return DevServer((host, port), handler)


def serve(root: str | Path, port: int) -> None:
    logger.info("=" * 60)
    logger.info("%s - Starting", _now())
    httpd = make_server(root, port)
    logger.info("Listening on port %d...", httpd.server_address[1])
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("%s - Stopped", _now())
    finally:
        httpd.server_close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Serve the static site for local development.")
    parser.add_argument("port", type=int, help="Port to listen on.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, stream=sys.stderr, format="%(message)s")
    serve(DEFAULT_ROOT, args.port)


if __name__ == "__main__":
    main()
