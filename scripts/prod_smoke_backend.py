#!/usr/bin/env python3
"""
Production smoke test (backend-only).

Flow:
- health + readiness
- CORS preflight answers 200
- wrong password is rejected generically
- admin endpoints refuse calls without x-admin-password
- (optional) dashboard metrics load with SMOKE_ADMIN_PASSWORD

Usage:
  SMOKE_BACKEND_URL="https://api.elkpeak.com" SMOKE_ORIGIN="https://elkpeak.com" python3 scripts/prod_smoke_backend.py
"""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from typing import Dict
from urllib.error import HTTPError, URLError
from urllib.parse import urljoin
from urllib.request import Request, build_opener


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def _json_loads(text: str):
    try:
        return json.loads(text)
    except ValueError:
        return None


@dataclass
class HttpResp:
    status: int
    text: str
    headers: Dict[str, str]

    @property
    def json(self):
        return _json_loads(self.text)


class Client:
    def __init__(self, base: str, origin: str | None = None, api_key: str | None = None):
        self.base = base.rstrip("/") + "/"
        self.default_headers: Dict[str, str] = {"Accept": "application/json"}
        if origin:
            self.default_headers["Origin"] = origin
        if api_key:
            self.default_headers["Authorization"] = f"Bearer {api_key}"
        self.opener = build_opener()

    def _request(self, method: str, path: str, body: bytes | None = None, headers: Dict[str, str] | None = None) -> HttpResp:
        url = urljoin(self.base, path.lstrip("/"))
        h = {**self.default_headers, **(headers or {})}
        req = Request(url, data=body, headers=h, method=method)
        try:
            with self.opener.open(req, timeout=30) as r:
                txt = r.read().decode("utf-8", errors="ignore")
                return HttpResp(status=getattr(r, "status", 200), text=txt, headers={k.lower(): v for k, v in r.headers.items()})
        except HTTPError as e:
            txt = e.read().decode("utf-8", errors="ignore") if hasattr(e, "read") else str(e)
            hdrs = {k.lower(): v for k, v in e.headers.items()} if e.headers else {}
            return HttpResp(status=getattr(e, "code", 0) or 0, text=txt, headers=hdrs)
        except URLError as e:
            return HttpResp(status=0, text=str(e), headers={})

    def get(self, path: str) -> HttpResp:
        return self._request("GET", path)

    def options(self, path: str) -> HttpResp:
        return self._request("OPTIONS", path, headers={"Access-Control-Request-Method": "POST"})

    def post_json(self, path: str, payload: dict, headers: Dict[str, str] | None = None) -> HttpResp:
        body = json.dumps(payload).encode("utf-8")
        return self._request("POST", path, body=body, headers={"Content-Type": "application/json", **(headers or {})})


def main() -> int:
    base = os.getenv("SMOKE_BACKEND_URL", "http://localhost:8000")
    origin = os.getenv("SMOKE_ORIGIN") or None
    admin_password = os.getenv("SMOKE_ADMIN_PASSWORD") or None
    c = Client(base, origin=origin, api_key=os.getenv("SMOKE_API_KEY") or None)

    print(f"[{_now_iso()}] smoke start")
    print(f"base: {base}")

    # 0) Health
    h = c.get("/health")
    if h.status != 200:
        print(f"FAIL health: {h.status} {h.text[:300]}")
        return 2
    print("OK health")

    ready = c.get("/readyz")
    if ready.status != 200:
        print(f"FAIL readyz: {ready.status} {ready.text[:500]}")
        return 3
    print("OK readyz")

    # 1) Preflight
    pre = c.options("/auth/verify")
    if pre.status != 200 or "access-control-allow-methods" not in pre.headers:
        print(f"FAIL preflight: {pre.status} {pre.headers}")
        return 4
    print("OK preflight")

    # 2) Wrong password
    bad = c.post_json("/auth/verify", {"password": f"smoke-wrong-{int(time.time())}"})
    if bad.status != 401 or (bad.json or {}).get("valid") is not False:
        print(f"FAIL auth rejection: {bad.status} {bad.text[:300]}")
        return 5
    print("OK auth rejection")

    # 3) Admin endpoint without credential
    anon = c.post_json("/dashboard/metrics", {})
    if anon.status != 401:
        print(f"FAIL admin guard: {anon.status} {anon.text[:300]}")
        return 6
    print("OK admin guard")

    # 4) Dashboard with a real credential
    if admin_password:
        m = c.post_json("/dashboard/metrics", {}, headers={"x-admin-password": admin_password})
        data = m.json if isinstance(m.json, dict) else None
        if m.status != 200 or not data or "elkPeak" not in data:
            print(f"FAIL dashboard metrics: {m.status} {m.text[:500]}")
            return 7
        print("OK dashboard metrics")
    else:
        print("SKIP dashboard metrics (SMOKE_ADMIN_PASSWORD not set)")

    print(f"[{_now_iso()}] smoke PASS")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
