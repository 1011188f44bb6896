import pytest

from conftest import ESTIMATE_PAYLOAD
from orderdesk.core.errors import InvalidInput
from orderdesk.schemas.order import MAX_ADDONS, OrderDetailsUpdate, clip_text
from orderdesk.services.submission_service import validate_order_payload


def reorder_payload(**overrides):
    payload = {
        "request_type": "Reorder",
        "customer_email": "buyer@example.com",
        "part_id": "BRK-2041",
        "revision": "C",
        "quantity": "100",
    }
    payload.update(overrides)
    return payload


def error_of(payload) -> str:
    with pytest.raises(InvalidInput) as exc_info:
        validate_order_payload(payload)
    return exc_info.value.detail


def test_estimate_is_accepted_and_normalized():
    draft = validate_order_payload({**ESTIMATE_PAYLOAD, "customer_email": "  Pat@Example.COM "})

    assert draft.customer_email == "pat@example.com"
    assert draft.request_type == "Estimate"
    assert draft.addons == ["Deburring", "Powder Coat"]
    assert draft.quantity == "25"


@pytest.mark.parametrize("payload", [None, [], "order", 42])
def test_non_object_body_is_rejected(payload):
    assert error_of(payload) == "Invalid request body"


@pytest.mark.parametrize("email", [None, "", "   ", 123])
def test_email_is_required(email):
    assert error_of({**ESTIMATE_PAYLOAD, "customer_email": email}) == "Email is required"


def test_missing_email_wins_over_bad_request_type():
    payload = {"request_type": "Quote"}
    assert error_of(payload) == "Email is required"


@pytest.mark.parametrize("request_type", [None, "estimate", "Quote"])
def test_request_type_must_be_known(request_type):
    payload = {**ESTIMATE_PAYLOAD, "request_type": request_type}
    assert error_of(payload) == "Invalid request type"


@pytest.mark.parametrize(
    "email",
    ["not-an-email", "pat@example", "pat @example.com", "a" * 250 + "@example.com"],
)
def test_malformed_email_is_rejected(email):
    assert error_of({**ESTIMATE_PAYLOAD, "customer_email": email}) == "Invalid email format"


def test_phone_with_letters_is_rejected():
    payload = {**ESTIMATE_PAYLOAD, "customer_phone": "call me maybe"}
    assert error_of(payload) == "Invalid phone format"


def test_long_phone_is_truncated():
    phone = "+1 (212) 555-0100 " + "0" * 10
    draft = validate_order_payload({**ESTIMATE_PAYLOAD, "customer_phone": phone})
    assert draft.customer_phone == phone[:20]


def test_free_text_is_truncated_not_rejected():
    draft = validate_order_payload(
        {**ESTIMATE_PAYLOAD, "customer_name": "x" * 150, "notes": "n" * 6000}
    )
    assert draft.customer_name == "x" * 100
    assert len(draft.notes) == 5000


def test_notes_cut_at_exactly_the_limit_even_on_whitespace():
    notes = "a" * 4999 + " " + "b" * 1000
    draft = validate_order_payload({**ESTIMATE_PAYLOAD, "notes": notes})

    assert len(draft.notes) == 5000
    assert draft.notes == notes[:5000]
    assert validate_order_payload(draft.model_dump()).notes == draft.notes


def test_blank_text_becomes_none():
    draft = validate_order_payload({**ESTIMATE_PAYLOAD, "company": "   ", "finish": 7.5})
    assert draft.company is None
    assert draft.finish == "7.5"


def test_numeric_quantity_is_kept_as_text():
    draft = validate_order_payload({**ESTIMATE_PAYLOAD, "quantity": 25})
    assert draft.quantity == "25"


def test_file_link_too_long_is_rejected():
    payload = {**ESTIMATE_PAYLOAD, "file_link": "https://drive.test/" + "a" * 2000}
    assert error_of(payload) == "File link too long (max 2000 characters)"


def test_addons_must_be_a_list():
    payload = {**ESTIMATE_PAYLOAD, "addons": "Deburring"}
    assert error_of(payload) == "Add-ons must be a list"


def test_addons_are_filtered_and_capped():
    addons = ["Tapping", 5, None, "  ", "y" * 150] + [f"Addon {i}" for i in range(30)]
    draft = validate_order_payload({**ESTIMATE_PAYLOAD, "addons": addons})

    assert draft.addons[0] == "Tapping"
    assert draft.addons[1] == "y" * 100
    assert len(draft.addons) == MAX_ADDONS


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), ("yes", True), ("false", False), (1, True), (0, False), (None, False)],
)
def test_callback_requested_is_coerced(value, expected):
    draft = validate_order_payload({**ESTIMATE_PAYLOAD, "callback_requested": value})
    assert draft.callback_requested is expected


def test_unknown_keys_and_client_status_are_dropped():
    draft = validate_order_payload(
        {**ESTIMATE_PAYLOAD, "status": "Delivered", "order_code": "HACK-1", "admin": True}
    )
    dumped = draft.model_dump()
    assert "status" not in dumped
    assert "order_code" not in dumped


def test_estimate_clears_reorder_fields():
    draft = validate_order_payload({**ESTIMATE_PAYLOAD, "part_id": "BRK-1", "revision": "B"})
    assert draft.part_id is None
    assert draft.revision is None


def test_reorder_clears_estimate_fields():
    draft = validate_order_payload(
        reorder_payload(
            offering="Laser Cutting",
            material="Steel",
            addons=["Deburring"],
            callback_requested=True,
            file_link="https://drive.test/part.dxf",
        )
    )
    assert draft.part_id == "BRK-2041"
    assert draft.offering is None
    assert draft.material is None
    assert draft.addons is None
    assert draft.file_link is None
    assert draft.callback_requested is False


def test_reorder_requires_part_id():
    assert error_of(reorder_payload(part_id="  ")) == "Part ID is required for reorders"


def test_reorder_requires_quantity():
    assert error_of(reorder_payload(quantity=None)) == "Quantity is required for reorders"


def test_sanitizing_twice_changes_nothing():
    first = validate_order_payload({**ESTIMATE_PAYLOAD, "customer_name": "  Pat  " + "x" * 200})
    second = validate_order_payload(first.model_dump())
    assert second.model_dump() == first.model_dump()


@pytest.mark.parametrize(
    "value",
    ["  padded  ", "a" * 120, "trailing   " + "b" * 95, None, "", 12],
)
def test_clip_text_is_idempotent(value):
    once = clip_text(value, 100)
    assert clip_text(once, 100) == once


def test_details_update_keeps_empty_string_as_clear():
    update = OrderDetailsUpdate.model_validate({"notes": "   ", "quantity": "40"})
    assert update.notes == ""
    assert update.quantity == "40"
    assert update.model_fields_set == {"notes", "quantity"}
