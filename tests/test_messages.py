from conftest import API


def post(client, order_id, body, headers):
    return client.post(f"{API}/orders/{order_id}/messages", json={"body": body}, headers=headers)


def test_customer_and_team_messages(client, submit, customer_headers, admin_headers):
    order_id = submit()["orderId"]

    first = post(client, order_id, "  Can you do 3/16 instead?  ", customer_headers)
    second = post(client, order_id, "Yes, I'll revise the quote.", admin_headers)

    assert first.status_code == 201
    assert first.json()["sender_type"] == "customer"
    assert first.json()["sender_email"] == "pat@example.com"
    assert first.json()["body"] == "Can you do 3/16 instead?"
    assert second.json()["sender_type"] == "team"

    timeline = client.get(f"{API}/orders/{order_id}/messages", headers=customer_headers)
    assert [m["sender_type"] for m in timeline.json()] == ["customer", "team"]


def test_messages_show_up_in_order_detail(client, submit, customer_headers):
    order_id = submit()["orderId"]
    post(client, order_id, "Drawing attached", customer_headers)

    detail = client.get(f"{API}/orders/{order_id}", headers=customer_headers).json()

    assert [m["body"] for m in detail["messages"]] == ["Drawing attached"]


def test_blank_message_is_rejected(client, submit, customer_headers):
    order_id = submit()["orderId"]

    response = post(client, order_id, "   ", customer_headers)

    assert response.status_code == 400


def test_other_customer_cannot_read_or_post(client, submit, other_headers):
    order_id = submit()["orderId"]

    assert post(client, order_id, "hello", other_headers).status_code == 404
    response = client.get(f"{API}/orders/{order_id}/messages", headers=other_headers)
    assert response.status_code == 404
