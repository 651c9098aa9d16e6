# -*- coding: utf-8 -*-
"""
MultiChain Python SDK
=====================

Client ad alto livello per le API JSON-RPC di un nodo MultiChain
(http://www.multichain.com/developers/json-rpc-api/).

Ogni metodo costruisce la lista posizionale di parametri attesa dal nodo e la passa
al trasporto (JsonRpcTransport). Il risultato decodificato viene restituito così com'è;
gli errori del trasporto (ApiError e sottoclassi) NON vengono intercettati.

Uso tipico:
-----------
from multichain_client.sdk.multichain_sdk import MultichainClient

client = MultichainClient("http://127.0.0.1:8570", "multichainrpc", "secret", timeout=3)
client.get_info()
client.create("stream1", allow_anyone=True)
client.publish("stream1", "key1", "48656c6c6f")
...

Note:
- I campi opzionali finali (custom, count, end_block, ...) lasciati a None vengono OMESSI
  dalla lista dei parametri: alcuni metodi del nodo cambiano comportamento in base al
  numero di argomenti, non al loro valore.
- send_asset_to_address / send_asset_from senza native_amount leggono prima
  'minimum-per-output' da getblockchainparams.

Licenza: MIT
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from multichain_client.sdk.jsonrpc_transport import (
    DEFAULT_TIMEOUT,
    ApiError,
    JsonRpcTransport,
    JsonValue,
)

__all__ = ["MultichainClient", "ApiError", "JsonValue"]

Addresses = Union[str, List[str]]


def _with_optional(params: List[Any], *optional: Any) -> List[Any]:
    """Accoda i campi opzionali, scartando quelli finali non impostati (None)."""
    tail = list(optional)
    while tail and tail[-1] is None:
        tail.pop()
    return params + tail


class MultichainClient:
    def __init__(
        self,
        url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        transport: Optional[Any] = None,
    ) -> None:
        if transport is None:
            if not url:
                raise ValueError("MultichainClient richiede url oppure un transport.")
            transport = JsonRpcTransport(url, username=username, password=password, timeout=timeout)
        self.transport = transport

    def set_debug(self, debug: bool) -> "MultichainClient":
        """Abilita il log di richieste/risposte sul trasporto. Ritorna il client (fluent)."""
        self.transport.set_debug(debug)
        return self

    # --------------------------
    # Helpers
    # --------------------------
    def _call(self, method: str, params: Optional[List[Any]] = None) -> JsonValue:
        return self.transport.execute(method, params if params is not None else [])

    def _minimum_per_output(self, native_amount: Optional[float]) -> float:
        if native_amount is not None:
            return native_amount
        params = self.get_blockchain_params()
        return params["minimum-per-output"]

    # --------------------------
    # Nodo
    # --------------------------
    def get_info(self) -> JsonValue:
        """
        Informazioni generali sul nodo e sulla blockchain (chainname, description,
        protocol, port, setupblocks, ...).
        """
        return self._call("getinfo")

    def get_peer_info(self) -> JsonValue:
        return self._call("getpeerinfo")

    def help(self) -> JsonValue:
        return self._call("help")

    def get_blockchain_params(self) -> JsonValue:
        """Parametri della blockchain (tra cui 'minimum-per-output')."""
        return self._call("getblockchainparams")

    # --------------------------
    # Indirizzi & chiavi
    # --------------------------
    def get_new_address(self) -> JsonValue:
        return self._call("getnewaddress")

    def dump_private_key(self, address: str) -> JsonValue:
        return self._call("dumpprivkey", [address])

    def import_private_key(self, privkey: Union[str, List[str]], label: str = "", rescan: bool = True) -> JsonValue:
        return self._call("importprivkey", [privkey, label, rescan])

    def import_address(self, address: Addresses, label: str = "", rescan: bool = True) -> JsonValue:
        """Aggiunge uno o più indirizzi watch-only. Con rescan=True il nodo riscansiona la catena."""
        return self._call("importaddress", [address, label, rescan])

    def add_multisig_address(self, n_required: int, addresses: List[str]) -> JsonValue:
        return self._call("addmultisigaddress", [n_required, addresses])

    def create_multisig(self, n_required: int, addresses: List[str]) -> JsonValue:
        return self._call("createmultisig", [n_required, addresses])

    def create_keypairs(self, count: int = 1) -> JsonValue:
        return self._call("createkeypairs", [count])

    def list_addresses(
        self,
        addresses: Addresses = "*",
        verbose: bool = False,
        count: Optional[int] = None,
        start: Optional[int] = None,
    ) -> JsonValue:
        """
        Indirizzi del wallet. Senza count/start il nodo usa i suoi default
        (tutti gli indirizzi, a partire dagli ultimi).
        """
        return self._call("listaddresses", _with_optional([addresses, verbose], count, start))

    def get_addresses(self, verbose: bool = False) -> JsonValue:
        return self._call("getaddresses", [verbose])

    def validate_address(self, address: str) -> JsonValue:
        return self._call("validateaddress", [address])

    # --------------------------
    # Saldi & transazioni del wallet
    # --------------------------
    def get_address_balances(self, address: str, min_conf: int = 1, include_locked: bool = False) -> JsonValue:
        return self._call("getaddressbalances", [address, min_conf, include_locked])

    def get_asset_balances(
        self,
        account: str = "",
        min_conf: int = 1,
        include_watch_only: bool = False,
        include_locked: bool = False,
    ) -> JsonValue:
        return self._call("getassetbalances", [account, min_conf, include_watch_only, include_locked])

    def get_total_balances(
        self,
        min_conf: int = 1,
        include_watch_only: bool = False,
        include_locked: bool = False,
    ) -> JsonValue:
        return self._call("gettotalbalances", [min_conf, include_watch_only, include_locked])

    def get_address_transaction(self, address: str, txid: str, verbose: bool = False) -> JsonValue:
        return self._call("getaddresstransaction", [address, txid, verbose])

    def get_wallet_transaction(self, txid: str, include_watch_only: bool = False, verbose: bool = False) -> JsonValue:
        return self._call("getwallettransaction", [txid, include_watch_only, verbose])

    def list_address_transactions(
        self,
        address: str,
        count: int = 10,
        skip: int = 0,
        verbose: bool = False,
    ) -> JsonValue:
        return self._call("listaddresstransactions", [address, count, skip, verbose])

    def list_wallet_transactions(
        self,
        count: int = 10,
        skip: int = 0,
        include_watch_only: bool = False,
        verbose: bool = False,
    ) -> JsonValue:
        """Ultime `count` transazioni del wallet, saltando le `skip` più recenti."""
        return self._call("listwallettransactions", [count, skip, include_watch_only, verbose])

    # --------------------------
    # Invio fondi
    # --------------------------
    def send_to_address(self, address: str, amount: Any, comment: str = "", comment_to: str = "") -> JsonValue:
        """`amount` può essere un numero (valuta nativa) o un dict {asset: qty}."""
        return self._call("sendtoaddress", [address, amount, comment, comment_to])

    def send_from_address(
        self,
        from_address: str,
        to_address: str,
        amount: Any,
        comment: str = "",
        comment_to: str = "",
    ) -> JsonValue:
        return self._call("sendfromaddress", [from_address, to_address, amount, comment, comment_to])

    def send_with_metadata(self, address: str, amount: Any, data_hex: str) -> JsonValue:
        return self._call("sendwithmetadata", [address, amount, data_hex])

    def send_with_metadata_from(self, from_address: str, to_address: str, amount: Any, data_hex: str) -> JsonValue:
        return self._call("sendwithmetadatafrom", [from_address, to_address, amount, data_hex])

    def send_asset_to_address(
        self,
        address: str,
        asset: str,
        qty: float,
        native_amount: Optional[float] = None,
        comment: str = "",
        comment_to: str = "",
    ) -> JsonValue:
        """
        Invia `qty` unità di `asset` ad `address`.

        Se native_amount è None, viene usato 'minimum-per-output' letto con
        getblockchainparams (una chiamata RPC in più).
        """
        native_amount = self._minimum_per_output(native_amount)
        return self._call("sendassettoaddress", [address, asset, qty, native_amount, comment, comment_to])

    def send_asset_from(
        self,
        from_address: str,
        to_address: str,
        asset: str,
        qty: float,
        native_amount: Optional[float] = None,
        comment: str = "",
        comment_to: str = "",
    ) -> JsonValue:
        native_amount = self._minimum_per_output(native_amount)
        return self._call(
            "sendassetfrom", [from_address, to_address, asset, qty, native_amount, comment, comment_to]
        )

    def combine_unspent(
        self,
        addresses: Addresses = "*",
        min_conf: int = 1,
        max_combines: int = 1,
        min_inputs: int = 10,
        max_inputs: int = 100,
        max_time: int = 30,
    ) -> JsonValue:
        return self._call("combineunspent", [addresses, min_conf, max_combines, min_inputs, max_inputs, max_time])

    # --------------------------
    # Asset
    # --------------------------
    def issue(
        self,
        address: str,
        name: str,
        qty: float,
        units: float = 1,
        native_amount: float = 0,
        custom: Optional[Dict[str, Any]] = None,
        open: bool = False,
    ) -> JsonValue:
        """
        Emette un nuovo asset `name` verso `address`.

        Il nome viene inviato come {"name": name, "open": open}; con open=True
        l'asset potrà essere riemesso con issue_more. `custom` viene accodato
        solo se impostato.
        """
        params = [address, {"name": name, "open": open}, qty, units, native_amount]
        return self._call("issue", _with_optional(params, custom))

    def issue_from(
        self,
        from_address: str,
        to_address: str,
        name: Union[str, Dict[str, Any]],
        qty: float,
        units: float = 1,
        native_amount: float = 0,
        custom: Optional[Dict[str, Any]] = None,
    ) -> JsonValue:
        params = [from_address, to_address, name, qty, units, native_amount]
        return self._call("issuefrom", _with_optional(params, custom))

    def issue_more(
        self,
        address: str,
        asset: str,
        qty: float,
        native_amount: float = 0,
        custom: Optional[Dict[str, Any]] = None,
    ) -> JsonValue:
        return self._call("issuemore", _with_optional([address, asset, qty, native_amount], custom))

    def list_assets(self, assets: Optional[Addresses] = None) -> JsonValue:
        return self._call("listassets", _with_optional([], assets))

    # --------------------------
    # Permessi
    # --------------------------
    def grant(
        self,
        addresses: Addresses,
        permissions: str,
        native_amount: float = 0,
        comment: str = "",
        comment_to: str = "",
        start_block: int = 0,
        end_block: Optional[int] = None,
    ) -> JsonValue:
        """
        Concede `permissions` (es. "connect,send,receive") ad `addresses`.
        Senza end_block il permesso non scade.
        """
        params = [addresses, permissions, native_amount, comment, comment_to, start_block]
        return self._call("grant", _with_optional(params, end_block))

    def grant_from(
        self,
        from_address: str,
        to_addresses: Addresses,
        permissions: str,
        native_amount: float = 0,
        comment: str = "",
        comment_to: str = "",
        start_block: int = 0,
        end_block: Optional[int] = None,
    ) -> JsonValue:
        params = [from_address, to_addresses, permissions, native_amount, comment, comment_to, start_block]
        return self._call("grantfrom", _with_optional(params, end_block))

    def revoke(
        self,
        addresses: Addresses,
        permissions: str,
        native_amount: float = 0,
        comment: str = "",
        comment_to: str = "",
    ) -> JsonValue:
        return self._call("revoke", [addresses, permissions, native_amount, comment, comment_to])

    def revoke_from(
        self,
        from_address: str,
        to_addresses: Addresses,
        permissions: str,
        native_amount: float = 0,
        comment: str = "",
        comment_to: str = "",
    ) -> JsonValue:
        return self._call("revokefrom", [from_address, to_addresses, permissions, native_amount, comment, comment_to])

    def list_permissions(self, permissions: str = "all", addresses: Addresses = "*", verbose: bool = False) -> JsonValue:
        return self._call("listpermissions", [permissions, addresses, verbose])

    # --------------------------
    # Transazioni raw & exchange
    # --------------------------
    def create_raw_transaction(self, inputs: List[Dict[str, Any]], addresses: Dict[str, Any]) -> JsonValue:
        return self._call("createrawtransaction", [inputs, addresses])

    def decode_raw_transaction(self, hex_string: str) -> JsonValue:
        return self._call("decoderawtransaction", [hex_string])

    def send_raw_transaction(self, hex_string: str, allow_high_fees: bool = False) -> JsonValue:
        return self._call("sendrawtransaction", [hex_string, allow_high_fees])

    def get_raw_transaction(self, txid: str, verbose: int = 0) -> JsonValue:
        return self._call("getrawtransaction", [txid, verbose])

    def get_tx_out(self, txid: str, vout: int, unconfirmed: bool = False) -> JsonValue:
        return self._call("gettxout", [txid, vout, unconfirmed])

    def get_block(self, block_hash: Union[str, int], verbose: Union[bool, int] = True) -> JsonValue:
        """`block_hash` accetta anche l'altezza del blocco."""
        return self._call("getblock", [block_hash, verbose])

    def list_unspent(
        self,
        min_conf: int = 1,
        max_conf: int = 999999,
        addresses: Optional[List[str]] = None,
    ) -> JsonValue:
        return self._call("listunspent", _with_optional([min_conf, max_conf], addresses))

    def append_raw_metadata(self, tx_hex: str, data_hex: str) -> JsonValue:
        return self._call("appendrawmetadata", [tx_hex, data_hex])

    def disable_raw_transaction(self, hex_string: str) -> JsonValue:
        return self._call("disablerawtransaction", [hex_string])

    def create_raw_exchange(self, txid: str, vout: int, ask_assets: Dict[str, Any]) -> JsonValue:
        return self._call("createrawexchange", [txid, vout, ask_assets])

    def append_raw_exchange(self, hex_string: str, txid: str, vout: int, ask_assets: Dict[str, Any]) -> JsonValue:
        return self._call("appendrawexchange", [hex_string, txid, vout, ask_assets])

    def decode_raw_exchange(self, hex_string: str, verbose: bool = False) -> JsonValue:
        return self._call("decoderawexchange", [hex_string, verbose])

    def prepare_lock_unspent(self, assets: Dict[str, Any], lock: bool = True) -> JsonValue:
        return self._call("preparelockunspent", [assets, lock])

    def prepare_lock_unspent_from(self, from_address: str, assets: Dict[str, Any], lock: bool = True) -> JsonValue:
        return self._call("preparelockunspentfrom", [from_address, assets, lock])

    # --------------------------
    # Stream
    # --------------------------
    def create(self, stream_name: str, allow_anyone: bool = False, custom: Optional[Dict[str, Any]] = None) -> JsonValue:
        """
        Crea lo stream `stream_name`. Con allow_anyone=True chiunque abbia il permesso
        'send' può pubblicare. `custom` viene accodato solo se impostato.
        """
        return self._call("create", _with_optional(["stream", stream_name, allow_anyone], custom))

    def create_from(
        self,
        from_address: str,
        stream_name: str,
        allow_anyone: bool = False,
        custom: Optional[Dict[str, Any]] = None,
    ) -> JsonValue:
        params = [from_address, "stream", stream_name, allow_anyone]
        return self._call("createfrom", _with_optional(params, custom))

    def list_streams(self, streams: Addresses = "*", verbose: bool = False, count: Optional[int] = None) -> JsonValue:
        return self._call("liststreams", _with_optional([streams, verbose], count))

    def publish(self, stream: str, key: Union[str, List[str]], data_hex: Any) -> JsonValue:
        return self._call("publish", [stream, key, data_hex])

    def publish_from(self, from_address: str, stream: str, key: Union[str, List[str]], data_hex: Any) -> JsonValue:
        return self._call("publishfrom", [from_address, stream, key, data_hex])

    def subscribe(self, stream: Addresses, rescan: bool = True) -> JsonValue:
        return self._call("subscribe", [stream, rescan])

    def unsubscribe(self, stream: Addresses) -> JsonValue:
        return self._call("unsubscribe", [stream])

    def get_stream_item(self, stream: str, txid: str, verbose: bool = False) -> JsonValue:
        return self._call("getstreamitem", [stream, txid, verbose])

    def list_stream_items(self, stream: str, verbose: bool = False, count: int = 10) -> JsonValue:
        return self._call("liststreamitems", [stream, verbose, count])

    def list_stream_key_items(self, stream: str, key: str, verbose: bool = False, count: int = 10) -> JsonValue:
        return self._call("liststreamkeyitems", [stream, key, verbose, count])

    def list_stream_keys(
        self,
        stream: str,
        keys: Addresses = "*",
        verbose: bool = False,
        count: Optional[int] = None,
    ) -> JsonValue:
        return self._call("liststreamkeys", _with_optional([stream, keys, verbose], count))

    def list_stream_publisher_items(
        self,
        stream: str,
        address: str,
        verbose: bool = False,
        count: int = 10,
    ) -> JsonValue:
        return self._call("liststreampublisheritems", [stream, address, verbose, count])

    def list_stream_publishers(
        self,
        stream: str,
        addresses: Addresses = "*",
        verbose: bool = False,
        count: Optional[int] = None,
    ) -> JsonValue:
        return self._call("liststreampublishers", _with_optional([stream, addresses, verbose], count))

    # --------------------------
    # Amministrazione wallet
    # --------------------------
    def backup_wallet(self, filename: str) -> JsonValue:
        return self._call("backupwallet", [filename])

    def dump_wallet(self, filename: str) -> JsonValue:
        return self._call("dumpwallet", [filename])

    def import_wallet(self, filename: str, rescan: int = 0) -> JsonValue:
        return self._call("importwallet", [filename, rescan])

    def encrypt_wallet(self, passphrase: str) -> JsonValue:
        return self._call("encryptwallet", [passphrase])

    def get_wallet_info(self) -> JsonValue:
        return self._call("getwalletinfo")

    def wallet_lock(self) -> JsonValue:
        return self._call("walletlock")

    def wallet_passphrase(self, passphrase: str, timeout: int) -> JsonValue:
        """Sblocca il wallet per `timeout` secondi."""
        return self._call("walletpassphrase", [passphrase, timeout])

    def wallet_passphrase_change(self, old_passphrase: str, new_passphrase: str) -> JsonValue:
        return self._call("walletpassphrasechange", [old_passphrase, new_passphrase])
