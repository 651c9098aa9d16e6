# -*- coding: utf-8 -*-
"""
utils.py

Configurazione del client MultiChain per l'API e conversione degli errori RPC
in HTTPException.

Variabili d'ambiente:
- MULTICHAIN_URL       (default http://127.0.0.1:8570)
- MULTICHAIN_USERNAME  (default multichainrpc)
- MULTICHAIN_PASSWORD  (default "")
- MULTICHAIN_TIMEOUT   secondi (default 3)
- MULTICHAIN_DEBUG     1/true/yes/on per loggare richieste e risposte RPC

Dipendenze:
- multichain_client/sdk/multichain_sdk.py
"""

import logging
import os

from fastapi import HTTPException

from multichain_client.sdk.jsonrpc_transport import (
    DEFAULT_TIMEOUT,
    ApiError,
    ConnectionFailureError,
    RpcError,
)
from multichain_client.sdk.multichain_sdk import MultichainClient

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_timeout(name: str = "MULTICHAIN_TIMEOUT") -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return DEFAULT_TIMEOUT
    try:
        return float(value)
    except ValueError:
        logger.warning("%s=%r non valido, uso il default di %s secondi", name, value, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT


def get_multichain_client() -> MultichainClient:
    url = os.getenv("MULTICHAIN_URL", "http://127.0.0.1:8570")
    username = os.getenv("MULTICHAIN_USERNAME", "multichainrpc")
    password = os.getenv("MULTICHAIN_PASSWORD", "")
    timeout = _env_timeout()

    # NIENTE singleton: ogni richiesta riceve un client nuovo
    client = MultichainClient(url, username, password, timeout=timeout)
    return client.set_debug(_env_flag("MULTICHAIN_DEBUG"))


def to_http_exception(e: ApiError) -> HTTPException:
    """
    Converte un errore del nodo nello status HTTP dell'API:
      - RpcError               -> 400 (codice e messaggio del nodo)
      - AccessDeniedError      -> 502
      - ConnectionFailureError -> 503
      - altri ApiError         -> 502
    """
    logger.warning("Chiamata RPC '%s' fallita: %s", e.method, e)
    detail = {"method": e.method, "code": e.code, "message": str(e)}
    if isinstance(e, RpcError):
        return HTTPException(status_code=400, detail=detail)
    if isinstance(e, ConnectionFailureError):
        return HTTPException(status_code=503, detail=detail)
    return HTTPException(status_code=502, detail=detail)
