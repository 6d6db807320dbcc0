"""
Typed records for Monzo API payloads.

Response records mirror the JSON the API returns and are built with
``from_api_response``. Monzo does not document every field, so records are
lenient: missing keys fall back to empty values and fields whose shape has
never been observed (``fees``, ``international``...) are passed through
untouched.

Request records (FeedItem, Receipt) render the form fields or JSON body the
API expects.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .ids import Id

logger = logging.getLogger(__name__)


class Currency(str, Enum):
    """Currency codes seen on Monzo accounts and pots.

    Monzo does not publish the list, so unknown codes are kept as plain strings.
    """

    GBP = "GBP"
    EUR = "EUR"
    USD = "USD"
    AUD = "AUD"
    CAD = "CAD"
    CHF = "CHF"
    CNY = "CNY"
    DKK = "DKK"
    HKD = "HKD"
    JPY = "JPY"
    NZD = "NZD"
    PLN = "PLN"
    RUB = "RUB"
    SEK = "SEK"
    SGD = "SGD"
    THB = "THB"
    TRY = "TRY"
    ZAR = "ZAR"


class AccountType(str, Enum):
    """Account types accepted by the /accounts filter and seen in responses."""

    UK_RETAIL = "uk_retail"
    UK_RETAIL_JOINT = "uk_retail_joint"
    UK_RETAIL_PLUS = "uk_retail_plus"
    UK_PERSONAL = "uk_personal"
    UK_BUSINESS = "uk_business"


def parse_currency(value: Any) -> Currency | str:
    """Map a currency code to Currency, keeping unknown codes as-is."""
    if not value:
        return ""
    try:
        return Currency(value)
    except ValueError:
        logger.debug("Unknown currency code %r", value)
        return str(value)


# ============================================================================
# Responses
# ============================================================================


@dataclass(frozen=True)
class WhoAmI:
    """Result of /ping/whoami."""

    authenticated: bool
    client_id: str
    user_id: str

    @classmethod
    def from_api_response(cls, data: dict) -> "WhoAmI":
        return cls(
            authenticated=bool(data.get("authenticated", False)),
            client_id=data.get("client_id", ""),
            user_id=data.get("user_id", ""),
        )


@dataclass(frozen=True)
class AccountOwner:
    user_id: Id
    preferred_name: str = ""
    preferred_first_name: str = ""


@dataclass(frozen=True)
class Account:
    """A current account (personal, joint or business)."""

    id: Id
    description: str
    created: str
    closed: bool = False
    type: str = ""
    currency: Currency | str = ""
    country_code: str = ""
    owners: tuple[AccountOwner, ...] = ()
    account_number: str = ""
    sort_code: str = ""
    business_id: Id | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Account":
        """Create from a single entry of the /accounts response."""
        owners = tuple(
            AccountOwner(
                user_id=o.get("user_id", ""),
                preferred_name=o.get("preferred_name", ""),
                preferred_first_name=o.get("preferred_first_name", ""),
            )
            for o in data.get("owners") or []
        )

        # Older responses only carry payment_details
        locale_uk = (data.get("payment_details") or {}).get("locale_uk") or {}

        return cls(
            id=data["id"],
            description=data.get("description", ""),
            created=data.get("created", ""),
            closed=bool(data.get("closed", False)),
            type=data.get("type", ""),
            currency=parse_currency(data.get("currency")),
            country_code=data.get("country_code", ""),
            owners=owners,
            account_number=data.get("account_number") or locale_uk.get("account_number", ""),
            sort_code=data.get("sort_code") or locale_uk.get("sort_code", ""),
            business_id=data.get("business_id"),
        )


@dataclass(frozen=True)
class Balance:
    """Balance of an account, in minor units (pennies for GBP)."""

    balance: int
    total_balance: int
    currency: Currency | str
    spend_today: int
    balance_including_flexible_savings: int | None = None
    local_currency: Currency | str = ""
    local_exchange_rate: float | None = None
    local_spend: Any = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Balance":
        return cls(
            balance=data.get("balance", 0),
            total_balance=data.get("total_balance", 0),
            currency=parse_currency(data.get("currency")),
            spend_today=data.get("spend_today", 0),
            balance_including_flexible_savings=data.get("balance_including_flexible_savings"),
            local_currency=parse_currency(data.get("local_currency")),
            local_exchange_rate=data.get("local_exchange_rate"),
            local_spend=data.get("local_spend"),
        )


@dataclass(frozen=True)
class Pot:
    """A savings pot attached to a current account."""

    id: Id
    name: str
    style: str
    balance: int
    currency: Currency | str
    created: str
    updated: str
    deleted: bool = False
    type: str = ""
    goal_amount: int | None = None
    current_account_id: Id | None = None
    product_id: str = ""
    cover_image_url: str = ""
    isa_wrapper: str = ""
    round_up: bool = False
    round_up_multiplier: int | None = None
    is_tax_pot: bool = False
    locked: bool = False
    charity_id: str = ""
    available_for_bills: bool = False
    has_virtual_cards: bool = False

    @classmethod
    def from_api_response(cls, data: dict) -> "Pot":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            style=data.get("style", ""),
            balance=data.get("balance", 0),
            currency=parse_currency(data.get("currency")),
            created=data.get("created", ""),
            updated=data.get("updated", ""),
            deleted=bool(data.get("deleted", False)),
            type=data.get("type", ""),
            goal_amount=data.get("goal_amount"),
            current_account_id=data.get("current_account_id"),
            product_id=data.get("product_id", ""),
            cover_image_url=data.get("cover_image_url", ""),
            isa_wrapper=data.get("isa_wrapper", ""),
            round_up=bool(data.get("round_up", False)),
            round_up_multiplier=data.get("round_up_multiplier"),
            is_tax_pot=bool(data.get("is_tax_pot", False)),
            locked=bool(data.get("locked", False)),
            charity_id=data.get("charity_id", ""),
            available_for_bills=bool(data.get("available_for_bills", False)),
            has_virtual_cards=bool(data.get("has_virtual_cards", False)),
        )


@dataclass(frozen=True)
class Address:
    address: str = ""
    city: str = ""
    country: str = ""
    postcode: str = ""
    region: str = ""
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Address":
        return cls(
            address=data.get("address", ""),
            city=data.get("city", ""),
            country=data.get("country", ""),
            postcode=data.get("postcode", ""),
            region=data.get("region", ""),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )


@dataclass(frozen=True)
class Merchant:
    """Merchant details, present on transactions fetched with expand[]=merchant."""

    id: Id
    name: str
    group_id: Id | None = None
    category: str = ""
    logo: str = ""
    emoji: str = ""
    created: str = ""
    address: Address | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Merchant":
        address = data.get("address")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            group_id=data.get("group_id"),
            category=data.get("category", ""),
            logo=data.get("logo", ""),
            emoji=data.get("emoji", ""),
            created=data.get("created", ""),
            address=Address.from_api_response(address) if address else None,
        )


@dataclass(frozen=True)
class Counterparty:
    """The other side of a payment. Every field is optional."""

    name: str | None = None
    preferred_name: str | None = None
    account_number: str | None = None
    sort_code: str | None = None
    user_id: Id | None = None
    account_id: Id | None = None
    beneficiary_account_type: str | None = None

    @classmethod
    def from_api_response(cls, data: dict | None) -> "Counterparty":
        data = data or {}
        return cls(
            name=data.get("name"),
            preferred_name=data.get("preferred_name"),
            account_number=data.get("account_number"),
            sort_code=data.get("sort_code"),
            user_id=data.get("user_id"),
            account_id=data.get("account_id"),
            beneficiary_account_type=data.get("beneficiary_account_type"),
        )


@dataclass(frozen=True)
class Attachment:
    """An image attached to a transaction."""

    id: Id
    external_id: str
    file_url: str
    file_type: str
    created: str = ""
    user_id: Id | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Attachment":
        return cls(
            id=data["id"],
            external_id=data.get("external_id", ""),
            file_url=data.get("file_url") or data.get("url", ""),
            file_type=data.get("file_type") or data.get("type", ""),
            created=data.get("created", ""),
            user_id=data.get("user_id"),
        )


@dataclass(frozen=True)
class AttachmentUpload:
    """Where to PUT the file bytes, and the URL to register afterwards."""

    file_url: str
    upload_url: str

    @classmethod
    def from_api_response(cls, data: dict) -> "AttachmentUpload":
        return cls(file_url=data["file_url"], upload_url=data["upload_url"])


@dataclass(frozen=True)
class Transaction:
    """
    A single transaction.

    ``merchant`` is the merchant id unless the transaction was requested
    with the merchant expanded, in which case it is a Merchant record.
    Amounts are in minor units; negative amounts are money leaving the
    account.
    """

    id: Id
    account_id: Id
    amount: int
    currency: Currency | str
    created: str
    description: str
    category: str = ""
    settled: str = ""
    updated: str = ""
    notes: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    merchant: Merchant | str | None = None
    counterparty: Counterparty = field(default_factory=Counterparty)
    attachments: tuple[Attachment, ...] = ()
    labels: tuple[str, ...] = ()
    categories: dict[str, int] = field(default_factory=dict)
    is_load: bool = False
    include_in_spending: bool = False
    amount_is_pending: bool = False
    originator: bool = False
    decline_reason: str | None = None
    scheme: str = ""
    dedupe_id: str = ""
    local_amount: int | None = None
    local_currency: Currency | str = ""
    user_id: str = ""
    parent_account_id: str = ""
    # Shapes never observed from the API; passed through as-is
    fees: Any = None
    international: Any = None
    atm_fees_detailed: Any = None
    tab: Any = None

    @property
    def is_declined(self) -> bool:
        return bool(self.decline_reason)

    @property
    def is_pending(self) -> bool:
        """Not yet settled."""
        return not self.settled

    @classmethod
    def from_api_response(cls, data: dict) -> "Transaction":
        merchant = data.get("merchant")
        if isinstance(merchant, dict):
            merchant = Merchant.from_api_response(merchant)

        return cls(
            id=data["id"],
            account_id=data.get("account_id", ""),
            amount=data.get("amount", 0),
            currency=parse_currency(data.get("currency")),
            created=data.get("created", ""),
            description=data.get("description", ""),
            category=data.get("category", ""),
            settled=data.get("settled", ""),
            updated=data.get("updated", ""),
            notes=data.get("notes", ""),
            metadata=dict(data.get("metadata") or {}),
            merchant=merchant or None,
            counterparty=Counterparty.from_api_response(data.get("counterparty")),
            attachments=tuple(
                Attachment.from_api_response(a) for a in data.get("attachments") or []
            ),
            labels=tuple(data.get("labels") or ()),
            categories=dict(data.get("categories") or {}),
            is_load=bool(data.get("is_load", False)),
            include_in_spending=bool(data.get("include_in_spending", False)),
            amount_is_pending=bool(data.get("amount_is_pending", False)),
            originator=bool(data.get("originator", False)),
            decline_reason=data.get("decline_reason"),
            scheme=data.get("scheme", ""),
            dedupe_id=data.get("dedupe_id", ""),
            local_amount=data.get("local_amount"),
            local_currency=parse_currency(data.get("local_currency")),
            user_id=data.get("user_id", ""),
            parent_account_id=data.get("parent_account_id", ""),
            fees=data.get("fees"),
            international=data.get("international"),
            atm_fees_detailed=data.get("atm_fees_detailed"),
            tab=data.get("tab"),
        )


@dataclass(frozen=True)
class Webhook:
    id: Id
    account_id: Id
    url: str

    @classmethod
    def from_api_response(cls, data: dict) -> "Webhook":
        return cls(id=data["id"], account_id=data.get("account_id", ""), url=data.get("url", ""))


# ============================================================================
# Requests
# ============================================================================


@dataclass(frozen=True)
class FeedItem:
    """A basic feed item shown in the user's Monzo feed."""

    title: str
    image_url: str
    body: str | None = None
    background_color: str | None = None  # hex, e.g. "#FCF1EE"
    title_color: str | None = None
    body_color: str | None = None
    # Opened when the user taps the item
    url: str | None = None

    def to_form(self, account_id: str) -> dict[str, str]:
        """Form fields for POST /feed."""
        form = {
            "account_id": account_id,
            "type": "basic",
            "params[title]": self.title,
            "params[image_url]": self.image_url,
        }
        for name in ("body", "background_color", "title_color", "body_color"):
            value = getattr(self, name)
            if value is not None:
                form[f"params[{name}]"] = value
        if self.url is not None:
            form["url"] = self.url
        return form


@dataclass(frozen=True)
class ReceiptItem:
    description: str
    amount: int
    currency: str
    quantity: float = 1
    unit: str = ""
    tax: int = 0
    sub_items: tuple["ReceiptItem", ...] = ()

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "amount": self.amount,
            "currency": self.currency,
            "quantity": self.quantity,
            "unit": self.unit,
            "tax": self.tax,
            "sub_items": [s.to_dict() for s in self.sub_items],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReceiptItem":
        return cls(
            description=data.get("description", ""),
            amount=data.get("amount", 0),
            currency=data.get("currency", ""),
            quantity=data.get("quantity", 1),
            unit=data.get("unit", ""),
            tax=data.get("tax", 0),
            sub_items=tuple(cls.from_dict(s) for s in data.get("sub_items") or []),
        )


@dataclass(frozen=True)
class ReceiptTax:
    description: str
    amount: int
    currency: str
    tax_number: str = ""

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "amount": self.amount,
            "currency": self.currency,
            "tax_number": self.tax_number,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReceiptTax":
        return cls(
            description=data.get("description", ""),
            amount=data.get("amount", 0),
            currency=data.get("currency", ""),
            tax_number=data.get("tax_number", ""),
        )


@dataclass(frozen=True)
class ReceiptPayment:
    type: str  # card, cash, gift_card
    amount: int
    currency: str
    last_four: str = ""
    gift_card_type: str = ""
    bin: str = ""
    auth_code: str = ""
    aid: str = ""
    mid: str = ""
    tid: str = ""

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "amount": self.amount,
            "currency": self.currency,
            "last_four": self.last_four,
            "gift_card_type": self.gift_card_type,
            "bin": self.bin,
            "auth_code": self.auth_code,
            "aid": self.aid,
            "mid": self.mid,
            "tid": self.tid,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReceiptPayment":
        return cls(
            type=data.get("type", ""),
            amount=data.get("amount", 0),
            currency=data.get("currency", ""),
            last_four=data.get("last_four", ""),
            gift_card_type=data.get("gift_card_type", ""),
            bin=data.get("bin", ""),
            auth_code=data.get("auth_code", ""),
            aid=data.get("aid", ""),
            mid=data.get("mid", ""),
            tid=data.get("tid", ""),
        )


@dataclass(frozen=True)
class ReceiptMerchant:
    name: str = ""
    online: bool = False
    phone: str = ""
    email: str = ""
    store_name: str = ""
    store_address: str = ""
    store_postcode: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "online": self.online,
            "phone": self.phone,
            "email": self.email,
            "store_name": self.store_name,
            "store_address": self.store_address,
            "store_postcode": self.store_postcode,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReceiptMerchant":
        return cls(
            name=data.get("name", ""),
            online=bool(data.get("online", False)),
            phone=data.get("phone", ""),
            email=data.get("email", ""),
            store_name=data.get("store_name", ""),
            store_address=data.get("store_address", ""),
            store_postcode=data.get("store_postcode", ""),
        )


@dataclass(frozen=True)
class Receipt:
    """
    Itemised receipt attached to a transaction.

    ``external_id`` is chosen by the caller and identifies the receipt for
    later reads and deletes; creating a receipt with an existing external_id
    replaces it.
    """

    transaction_id: Id
    external_id: str
    total: int
    currency: str
    items: tuple[ReceiptItem, ...] = ()
    taxes: tuple[ReceiptTax, ...] = ()
    payments: tuple[ReceiptPayment, ...] = ()
    merchant: ReceiptMerchant | None = None
    # Assigned by Monzo, only present on receipts read back from the API
    id: str | None = None

    def to_payload(self) -> dict:
        """JSON body for PUT /transaction-receipts."""
        payload = {
            "transaction_id": self.transaction_id,
            "external_id": self.external_id,
            "total": self.total,
            "currency": self.currency,
            "items": [i.to_dict() for i in self.items],
            "taxes": [t.to_dict() for t in self.taxes],
            "payments": [p.to_dict() for p in self.payments],
        }
        if self.merchant is not None:
            payload["merchant"] = self.merchant.to_dict()
        return payload

    @classmethod
    def from_api_response(cls, data: dict) -> "Receipt":
        merchant = data.get("merchant")
        return cls(
            id=data.get("id"),
            transaction_id=data.get("transaction_id", ""),
            external_id=data.get("external_id", ""),
            total=data.get("total", 0),
            currency=data.get("currency", ""),
            items=tuple(ReceiptItem.from_dict(i) for i in data.get("items") or []),
            taxes=tuple(ReceiptTax.from_dict(t) for t in data.get("taxes") or []),
            payments=tuple(ReceiptPayment.from_dict(p) for p in data.get("payments") or []),
            merchant=ReceiptMerchant.from_dict(merchant) if merchant else None,
        )
