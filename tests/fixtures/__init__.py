"""
Sample Monzo API payloads and request inspection helpers.

Payloads follow the examples in the Monzo API reference.
"""

from urllib.parse import parse_qs, urlparse

BASE_URL = "https://api.monzo.com"

SAMPLE_ACCOUNT = {
    "id": "acc_00009237aqC8c5umZmrRdh",
    "closed": False,
    "created": "2015-11-13T12:17:42.102Z",
    "description": "Peter Pan's Account",
    "type": "uk_retail",
    "currency": "GBP",
    "country_code": "GB",
    "owners": [
        {
            "user_id": "user_00009237aqC8c5umZmrRdh",
            "preferred_name": "Peter Pan",
            "preferred_first_name": "Peter",
        }
    ],
    "account_number": "12345678",
    "sort_code": "040004",
    "payment_details": {"locale_uk": {"account_number": "12345678", "sort_code": "040004"}},
}

SAMPLE_POT = {
    "id": "pot_0000778xxfgh4iu8z83nWb",
    "name": "Savings",
    "style": "beach_ball",
    "balance": 133700,
    "currency": "GBP",
    "created": "2017-11-09T12:30:53.695Z",
    "updated": "2017-11-09T12:30:53.695Z",
    "deleted": False,
    "type": "flexible_savings",
    "goal_amount": 500000,
    "current_account_id": "acc_00009237aqC8c5umZmrRdh",
    "locked": False,
}

SAMPLE_MERCHANT = {
    "address": {
        "address": "98 Southgate Road",
        "city": "London",
        "country": "GB",
        "latitude": 51.54151,
        "longitude": -0.08482400000002599,
        "postcode": "N1 3JD",
        "region": "Greater London",
    },
    "created": "2015-08-22T12:20:18Z",
    "group_id": "grp_00008zIcpbBOaAr7TTP3sv",
    "id": "merch_00008zIcpbAKe8shBxXUtl",
    "logo": "https://pbs.twimg.com/profile_images/527043602623389696/68_SgUWJ.jpeg",
    "emoji": "🍞",
    "name": "The De Beauvoir Deli Co.",
    "category": "eating_out",
}

SAMPLE_TRANSACTION = {
    "account_id": "acc_00009237aqC8c5umZmrRdh",
    "amount": -510,
    "created": "2015-08-22T12:20:18Z",
    "currency": "GBP",
    "description": "THE DE BEAUVOIR DELI C LONDON        GBR",
    "id": "tx_00008zIcpb1TB4yeIFXMzx",
    "merchant": "merch_00008zIcpbAKe8shBxXUtl",
    "metadata": {},
    "notes": "Salmon sandwich 🍞",
    "is_load": False,
    "settled": "2015-08-23T12:20:18Z",
    "category": "eating_out",
    "counterparty": {},
    "attachments": [],
    "dedupe_id": "com.monzo.tx.123",
    "scheme": "mastercard",
    "fees": {},
    "international": None,
}

SAMPLE_TOKEN_RESPONSE = {
    "access_token": "access_token_abc",
    "client_id": "oauth2client_test",
    "expires_in": 21600,
    "refresh_token": "refresh_token_xyz",
    "token_type": "Bearer",
    "user_id": "user_00009237aqC8c5umZmrRdh",
}


def query_of(request) -> dict[str, list[str]]:
    """Parsed query string of a recorded request."""
    return parse_qs(urlparse(request.url).query)


def form_of(request) -> dict[str, str]:
    """Parsed form-encoded body of a recorded request (single values)."""
    body = request.body or ""
    if isinstance(body, bytes):
        body = body.decode()
    return {k: v[0] for k, v in parse_qs(body, keep_blank_values=True).items()}


