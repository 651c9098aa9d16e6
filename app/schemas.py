from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


# =============================================================================
# STREAM
# =============================================================================
class CreateStreamRequest(BaseModel):
    """
    Modello dei dati di input per la creazione di uno stream.

    **Campi**:
    - **name**: Nome dello stream.
    - **open**: Se True chiunque abbia il permesso 'send' può pubblicare.
    - **custom**: Campi custom opzionali (inviati al nodo solo se presenti).
    - **from_address**: Indirizzo da cui creare lo stream (opzionale, usa createfrom).
    """
    name: str = Field(
        ...,
        description="Nome dello stream da creare."
    )
    open: bool = Field(
        False,
        description="Se True lo stream è aperto a tutti gli indirizzi con permesso 'send'."
    )
    custom: Optional[Dict[str, Any]] = Field(
        None,
        description="Campi custom dello stream. Se assenti non vengono inviati al nodo."
    )
    from_address: Optional[str] = Field(
        None,
        description="Indirizzo creatore. Se indicato viene usato 'createfrom'."
    )


class PublishRequest(BaseModel):
    """
    Modello dei dati di input per la pubblicazione di un item su uno stream.

    **Campi**:
    - **key**: Chiave dell'item.
    - **data_hex**: Contenuto in esadecimale (oppure oggetto {"json": ...} / {"text": ...}).
    - **from_address**: Indirizzo di pubblicazione (opzionale, usa publishfrom).
    """
    key: str = Field(
        ...,
        description="Chiave dell'item pubblicato."
    )
    data_hex: Any = Field(
        ...,
        description="Dati in esadecimale, oppure {'json': ...} / {'text': ...}."
    )
    from_address: Optional[str] = Field(
        None,
        description="Indirizzo di pubblicazione. Se indicato viene usato 'publishfrom'."
    )


# =============================================================================
# ASSET
# =============================================================================
class SendAssetRequest(BaseModel):
    """
    Modello dei dati di input per l'invio di un asset.

    Se **native_amount** è assente il nodo viene interrogato per 'minimum-per-output'.
    """
    address: str = Field(
        ...,
        description="Indirizzo destinatario."
    )
    asset: str = Field(
        ...,
        description="Asset (nome, ref o txid di emissione)."
    )
    qty: float = Field(
        ...,
        description="Quantità di asset da inviare."
    )
    native_amount: Optional[float] = Field(
        None,
        description="Valuta nativa da allegare all'output. Default: 'minimum-per-output' della blockchain."
    )
    comment: str = Field(
        "",
        description="Commento (solo wallet locale)."
    )
    comment_to: str = Field(
        "",
        description="Commento sul destinatario (solo wallet locale)."
    )
    from_address: Optional[str] = Field(
        None,
        description="Indirizzo mittente. Se indicato viene usato 'sendassetfrom'."
    )


class RpcResponse(BaseModel):
    result: Any = Field(
        None,
        description="Risultato restituito dal nodo, senza modifiche."
    )
