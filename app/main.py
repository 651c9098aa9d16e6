from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.schemas import CreateStreamRequest, PublishRequest, RpcResponse, SendAssetRequest
from app.utils import get_multichain_client, to_http_exception
from multichain_client.sdk.multichain_sdk import ApiError, MultichainClient


app = FastAPI(
    title="MultiChain Node API",
    description="""
Questa API espone alcune operazioni di un nodo MultiChain tramite HTTP/JSON.
Ogni endpoint inoltra la richiesta al nodo tramite JSON-RPC (client `MultichainClient`)
e restituisce il risultato del nodo invariato nel campo `result`.

Gli errori del nodo vengono restituiti come:
- **400**: errore RPC del nodo (parametri errati, permessi insufficienti, asset inesistente, ...)
- **502**: credenziali RPC rifiutate o risposta non valida
- **503**: nodo irraggiungibile
    """,
    version="0.1.0",
)

# Configurazione CORS per permettere tutte le origini
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Health Check"])
def root():
    """
    **Health Check**

    Verifica che il servizio sia attivo (nessuna chiamata al nodo).

    **Esempio di risposta**:
    ```json
    {
      "message": "API MultiChain attiva."
    }
    ```
    """
    return {"message": "API MultiChain attiva."}


# ----------------------------------------------------------------------------
# NODO
# ----------------------------------------------------------------------------
@app.get("/node/info", response_model=RpcResponse, tags=["Nodo"])
def node_info(client: MultichainClient = Depends(get_multichain_client)):
    """Informazioni generali sul nodo (`getinfo`)."""
    try:
        return RpcResponse(result=client.get_info())
    except ApiError as e:
        raise to_http_exception(e)


@app.get("/node/params", response_model=RpcResponse, tags=["Nodo"])
def node_params(client: MultichainClient = Depends(get_multichain_client)):
    """Parametri della blockchain (`getblockchainparams`)."""
    try:
        return RpcResponse(result=client.get_blockchain_params())
    except ApiError as e:
        raise to_http_exception(e)


# ----------------------------------------------------------------------------
# INDIRIZZI & WALLET
# ----------------------------------------------------------------------------
@app.get("/addresses/{address}/validate", response_model=RpcResponse, tags=["Indirizzi"])
def validate_address(address: str, client: MultichainClient = Depends(get_multichain_client)):
    try:
        return RpcResponse(result=client.validate_address(address))
    except ApiError as e:
        raise to_http_exception(e)


@app.get("/addresses/{address}/balances", response_model=RpcResponse, tags=["Indirizzi"])
def address_balances(
    address: str,
    min_conf: int = 1,
    include_locked: bool = False,
    client: MultichainClient = Depends(get_multichain_client),
):
    """Saldi degli asset per `address` con almeno `min_conf` conferme (`getaddressbalances`)."""
    try:
        return RpcResponse(result=client.get_address_balances(address, min_conf, include_locked))
    except ApiError as e:
        raise to_http_exception(e)


@app.get("/wallet/transactions", response_model=RpcResponse, tags=["Wallet"])
def wallet_transactions(
    count: int = 10,
    skip: int = 0,
    verbose: bool = False,
    client: MultichainClient = Depends(get_multichain_client),
):
    try:
        return RpcResponse(result=client.list_wallet_transactions(count, skip, verbose=verbose))
    except ApiError as e:
        raise to_http_exception(e)


# ----------------------------------------------------------------------------
# STREAM
# ----------------------------------------------------------------------------
@app.get("/streams", response_model=RpcResponse, tags=["Stream"])
def list_streams(
    streams: str = "*",
    verbose: bool = False,
    count: Optional[int] = None,
    client: MultichainClient = Depends(get_multichain_client),
):
    try:
        return RpcResponse(result=client.list_streams(streams, verbose, count))
    except ApiError as e:
        raise to_http_exception(e)


@app.post("/streams", response_model=RpcResponse, tags=["Stream"])
def create_stream(req: CreateStreamRequest, client: MultichainClient = Depends(get_multichain_client)):
    """
    **Creazione stream**

    Crea uno stream (`create`, oppure `createfrom` se è indicato `from_address`).
    Il campo `custom` viene inviato al nodo solo se presente.

    **Esempio di richiesta**:
    ```json
    {
      "name": "documenti",
      "open": false,
      "custom": {"descrizione": "Hash dei documenti notarizzati"}
    }
    ```
    """
    try:
        if req.from_address:
            result = client.create_from(req.from_address, req.name, req.open, req.custom)
        else:
            result = client.create(req.name, req.open, req.custom)
        return RpcResponse(result=result)
    except ApiError as e:
        raise to_http_exception(e)


@app.post("/streams/{stream}/subscribe", response_model=RpcResponse, tags=["Stream"])
def subscribe_stream(stream: str, rescan: bool = True, client: MultichainClient = Depends(get_multichain_client)):
    try:
        return RpcResponse(result=client.subscribe(stream, rescan))
    except ApiError as e:
        raise to_http_exception(e)


@app.post("/streams/{stream}/unsubscribe", response_model=RpcResponse, tags=["Stream"])
def unsubscribe_stream(stream: str, client: MultichainClient = Depends(get_multichain_client)):
    try:
        return RpcResponse(result=client.unsubscribe(stream))
    except ApiError as e:
        raise to_http_exception(e)


@app.get("/streams/{stream}/items", response_model=RpcResponse, tags=["Stream"])
def list_stream_items(
    stream: str,
    verbose: bool = False,
    count: int = 10,
    client: MultichainClient = Depends(get_multichain_client),
):
    try:
        return RpcResponse(result=client.list_stream_items(stream, verbose, count))
    except ApiError as e:
        raise to_http_exception(e)


@app.post("/streams/{stream}/items", response_model=RpcResponse, tags=["Stream"])
def publish_item(stream: str, req: PublishRequest, client: MultichainClient = Depends(get_multichain_client)):
    """
    **Pubblicazione item**

    Pubblica un item su `stream` (`publish`, oppure `publishfrom` se è indicato `from_address`).
    Ritorna il txid della transazione.
    """
    try:
        if req.from_address:
            result = client.publish_from(req.from_address, stream, req.key, req.data_hex)
        else:
            result = client.publish(stream, req.key, req.data_hex)
        return RpcResponse(result=result)
    except ApiError as e:
        raise to_http_exception(e)


# ----------------------------------------------------------------------------
# ASSET
# ----------------------------------------------------------------------------
@app.post("/assets/send", response_model=RpcResponse, tags=["Asset"])
def send_asset(req: SendAssetRequest, client: MultichainClient = Depends(get_multichain_client)):
    """
    **Invio asset**

    Invia `qty` unità di `asset` ad `address` (`sendassettoaddress`, oppure `sendassetfrom`
    se è indicato `from_address`). Senza `native_amount` viene usato il 'minimum-per-output'
    della blockchain.

    **Esempio di richiesta**:
    ```json
    {
      "address": "1XXXXXXX...",
      "asset": "asset1",
      "qty": 10
    }
    ```
    """
    try:
        if req.from_address:
            result = client.send_asset_from(
                req.from_address, req.address, req.asset, req.qty, req.native_amount, req.comment, req.comment_to
            )
        else:
            result = client.send_asset_to_address(
                req.address, req.asset, req.qty, req.native_amount, req.comment, req.comment_to
            )
        return RpcResponse(result=result)
    except ApiError as e:
        raise to_http_exception(e)
