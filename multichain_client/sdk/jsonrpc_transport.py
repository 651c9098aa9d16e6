# -*- coding: utf-8 -*-
"""
jsonrpc_transport.py
--------------------
Trasporto JSON-RPC generico su HTTP (requests) usato da MultichainClient.

Si occupa di:
  - costruire l'envelope JSON-RPC {"jsonrpc", "method", "id", "params"}
  - autenticazione HTTP Basic (utente/password RPC del nodo)
  - header fissi (User-Agent descrittivo, Content-Type JSON)
  - timeout fisso impostato alla costruzione
  - decodifica della risposta e conversione degli errori in ApiError

La costruzione NON effettua chiamate di rete: la prima richiesta parte solo
con execute().

Con debug attivo ogni chiamata viene scritta su stderr (livello DEBUG),
credenziali escluse.

Licenza: MIT
"""

from __future__ import annotations

import itertools
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence, Union

import requests

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

DEBUG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class _StderrHandler(logging.StreamHandler):
    """Scrive sempre sullo stderr corrente (anche se sostituito dopo la creazione)."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def enable_debug_logging() -> None:
    """Porta il logger del trasporto a DEBUG e aggiunge (una sola volta) un handler su stderr."""
    logger.setLevel(logging.DEBUG)
    if not any(isinstance(h, _StderrHandler) for h in logger.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter(DEBUG_FORMAT))
        logger.addHandler(handler)


JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

DEFAULT_TIMEOUT = 3.0

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": f"multichain-client-python/{__version__}",
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class ApiError(RuntimeError):
    """Errore generico per chiamate RPC fallite."""

    def __init__(self, message: str, method: Optional[str] = None, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.method = method
        self.code = code


class ConnectionFailureError(ApiError):
    """Nodo irraggiungibile (connessione rifiutata, timeout, TLS...)."""


class AccessDeniedError(ApiError):
    """Credenziali RPC rifiutate dal nodo (HTTP 401/403)."""


class RpcError(ApiError):
    """Errore restituito dal nodo nel campo 'error' della risposta JSON-RPC."""


class JsonRpcTransport:
    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        debug: bool = False,
    ) -> None:
        self.url = url
        self.username = username
        self.password = password
        self.timeout = timeout
        self.headers: Dict[str, str] = dict(DEFAULT_HEADERS)
        if headers:
            self.headers.update(headers)
        self.debug = False
        self.set_debug(debug)

        self._ids = itertools.count(1)

    @property
    def auth(self) -> Optional[tuple]:
        if self.username is None and self.password is None:
            return None
        return (self.username or "", self.password or "")

    def set_debug(self, debug: bool) -> "JsonRpcTransport":
        self.debug = bool(debug)
        if self.debug:
            enable_debug_logging()
        return self

    def _payload(self, method: str, params: Optional[Sequence[Any]]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"jsonrpc": "2.0", "method": method, "id": next(self._ids)}
        # lista vuota: il campo params non viene inviato
        if params:
            payload["params"] = list(params)
        return payload

    def execute(self, method: str, params: Optional[Sequence[Any]] = None) -> JsonValue:
        """
        Esegue la chiamata RPC `method` con la lista posizionale `params`.

        Ritorna il campo 'result' decodificato, senza interpretarlo.
        Solleva ConnectionFailureError, AccessDeniedError, RpcError oppure ApiError.
        """
        payload = self._payload(method, params)
        if self.debug:
            logger.debug("RPC -> %s %s params=%s", self.url, method, payload.get("params", []))

        try:
            resp = requests.post(
                self.url,
                json=payload,
                headers=self.headers,
                auth=self.auth,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ConnectionFailureError(f"Impossibile raggiungere {self.url}: {e}", method=method) from e

        if self.debug:
            logger.debug("RPC <- %s HTTP %s: %s", method, resp.status_code, resp.text)

        if resp.status_code in (401, 403):
            raise AccessDeniedError(
                f"Accesso negato dal nodo (HTTP {resp.status_code})", method=method, code=resp.status_code
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise ApiError(f"HTTP {resp.status_code} su {method}: {resp.text}", method=method) from e

        # il nodo risponde agli errori RPC con HTTP 500 e un body JSON valido
        error = body.get("error") if isinstance(body, dict) else None
        if error is not None:
            if isinstance(error, dict):
                raise RpcError(str(error.get("message", error)), method=method, code=error.get("code"))
            raise RpcError(str(error), method=method)

        if not resp.ok:
            raise ApiError(f"HTTP {resp.status_code} su {method}: {resp.text}", method=method)

        if not isinstance(body, dict) or "result" not in body:
            raise ApiError(f"Risposta JSON-RPC non valida da {method}: {resp.text}", method=method)

        return body["result"]
