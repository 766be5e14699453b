"""Tests for the storefront client sync engine and view state."""
import httpx
import pytest

from app.storefront.state import AppState, ViewState, check_admin_passcode
from app.storefront.sync import StorefrontClient, image_root_for

PASSCODE = "Nm643PpQ"


class Recorder:
    """Collects notifications and answers confirmations."""

    def __init__(self, answer=True):
        self.messages = []
        self.questions = []
        self.answer = answer

    def notify(self, message):
        self.messages.append(message)

    def confirm(self, message):
        self.questions.append(message)
        return self.answer


def make_client(handler, recorder=None):
    recorder = recorder or Recorder()
    http = httpx.Client(base_url="http://shop.test", transport=httpx.MockTransport(handler))
    return StorefrontClient(
        http=http,
        notify=recorder.notify,
        confirm=recorder.confirm,
        passcode=PASSCODE
    ), recorder


@pytest.fixture
def storefront(client):
    """Sync engine talking to the real app through the test client."""
    recorder = Recorder()
    engine = StorefrontClient(
        http=client,
        notify=recorder.notify,
        confirm=recorder.confirm,
        passcode=PASSCODE
    )
    engine.recorder = recorder
    return engine


def test_image_root_for():
    assert image_root_for("http://localhost:3000/admin?x=1") == "http://localhost:3000"
    assert image_root_for("https://shop.example.com/") == "https://shop.example.com"


def test_initial_state():
    state = AppState()

    assert state.catalog == []
    assert state.active_category == "all"
    assert state.view.section == "shop"
    assert state.view.admin_nav_visible is False


def test_view_rejects_unknown_section():
    with pytest.raises(ValueError):
        ViewState().show("checkout")


def test_check_admin_passcode():
    assert check_admin_passcode(None, PASSCODE) is None
    assert check_admin_passcode("wrong", PASSCODE) is False
    assert check_admin_passcode(PASSCODE, PASSCODE) is True


def test_refresh_and_filters(storefront, create_product):
    """Test refresh loads the catalog and filters re-render locally."""
    create_product(name="Lamp", category="Decor", price="2000")
    create_product(name="Sofa", category="Furniture", price="15000")

    assert storefront.refresh() is True
    assert [p["name"] for p in storefront.rendered.products] == ["Sofa", "Lamp"]
    assert "http://testserver/uploads/prod_" in storefront.rendered.public_html

    storefront.set_filter("Decor")
    assert [p["name"] for p in storefront.rendered.products] == ["Lamp"]
    assert storefront.state.is_active_tab("Decor")
    assert not storefront.state.is_active_tab("all")

    storefront.set_filter("all")
    storefront.set_search_term("so")
    assert [p["name"] for p in storefront.rendered.products] == ["Sofa"]


def test_create_listing_success(storefront, image_file):
    storefront.show_section("admin")

    ok = storefront.create_listing(
        {"name": "Sofa", "category": "Furniture", "condition": "Used", "price": "15000", "desc": "Comfy"},
        image_file
    )

    assert ok is True
    assert "Item successfully listed!" in storefront.recorder.messages
    assert storefront.state.form.fields == {}
    assert storefront.state.form.submit_enabled is True
    assert storefront.state.form.submit_label == "Post to Showroom"
    assert storefront.state.view.section == "shop"
    assert [p["name"] for p in storefront.state.catalog] == ["Sofa"]


def test_create_listing_without_image(storefront):
    """Test the client refuses to submit without an image."""
    ok = storefront.create_listing({"name": "Sofa"}, None)

    assert ok is False
    assert storefront.recorder.messages == ["Please select an image."]
    assert storefront.state.catalog == []


def test_create_listing_server_error_keeps_form():
    recorder = Recorder()
    seen = {}

    def handler(request):
        seen["enabled"] = client.state.form.submit_enabled
        seen["label"] = client.state.form.submit_label
        return httpx.Response(500, json={"error": "Failed to save to database"})

    client, _ = make_client(handler, recorder)
    fields = {"name": "Sofa", "category": "Furniture", "price": "15000"}

    ok = client.create_listing(fields, ("sofa.jpg", b"data", "image/jpeg"))

    assert ok is False
    assert seen == {"enabled": False, "label": "Processing..."}
    assert recorder.messages == ["Upload failed: Failed to save to database"]
    assert client.state.form.fields == fields
    assert client.state.form.submit_enabled is True
    assert client.state.form.submit_label == "Post to Showroom"


def test_create_listing_error_without_body():
    client, recorder = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))

    client.create_listing({"name": "Sofa"}, ("sofa.jpg", b"data", "image/jpeg"))

    assert recorder.messages == ["Upload failed: Unknown error"]


def test_create_listing_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, recorder = make_client(handler)

    ok = client.create_listing({"name": "Sofa"}, ("sofa.jpg", b"data", "image/jpeg"))

    assert ok is False
    assert recorder.messages == ["Network error during upload."]
    assert client.state.form.submit_enabled is True


def test_refresh_failure_clears_stale_catalog():
    """Test a failed refresh never leaves the previous catalog on screen."""
    responses = [
        httpx.Response(200, json=[{"id": 1, "name": "Lamp", "category": "Decor", "image_url": "/uploads/a.png"}]),
        httpx.Response(500, json={"error": "Database error", "details": "gone"}),
    ]
    client, recorder = make_client(lambda request: responses.pop(0))

    assert client.refresh() is True
    assert len(client.state.catalog) == 1

    assert client.refresh() is False
    assert client.state.catalog == []
    assert "No products found." in client.rendered.public_html
    assert len(recorder.messages) == 1


@pytest.mark.parametrize("handler", [
    lambda request: httpx.Response(200, text="<html>not json</html>"),
    lambda request: httpx.Response(200, json={"unexpected": "object"}),
])
def test_refresh_malformed_body(handler):
    client, recorder = make_client(handler)
    client.state.replace_catalog([{"id": 9, "name": "Old"}])

    assert client.refresh() is False
    assert client.state.catalog == []
    assert client.state.last_error
    assert recorder.messages


def test_refresh_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, recorder = make_client(handler)

    assert client.refresh() is False
    assert client.state.catalog == []
    assert recorder.messages[0].startswith("Network error connecting to API")


def test_delete_listing(storefront, create_product):
    keep_id = create_product(name="Keep")
    delete_id = create_product(name="Remove")
    storefront.refresh()

    assert storefront.delete_listing(delete_id) is True
    assert storefront.recorder.questions == ["Delete this item?"]
    assert [p["id"] for p in storefront.state.catalog] == [keep_id]


def test_delete_listing_declined():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"message": "Deleted"})

    client, recorder = make_client(handler, Recorder(answer=False))

    assert client.delete_listing(1) is False
    assert calls == []


def test_delete_listing_failure():
    client, recorder = make_client(lambda request: httpx.Response(500, json={"error": "Failed to delete item"}))

    assert client.delete_listing(1) is False
    assert recorder.messages == ["Could not delete item."]


def test_wrong_passcode_stays_on_shop():
    """Test a wrong passcode keeps admin navigation hidden."""
    client, recorder = make_client(lambda request: httpx.Response(200, json=[]))

    assert client.attempt_admin_login("wrong") is False
    assert client.state.view.admin_nav_visible is False
    assert client.state.view.section == "shop"
    assert recorder.messages == ["Access Denied."]


def test_cancelled_prompt_is_noop():
    client, recorder = make_client(lambda request: httpx.Response(200, json=[]))

    assert client.attempt_admin_login(None) is False
    assert client.state.view.section == "shop"
    assert recorder.messages == []


def test_correct_passcode_opens_admin():
    client, recorder = make_client(lambda request: httpx.Response(200, json=[]))

    assert client.attempt_admin_login(PASSCODE) is True
    assert client.state.view.admin_nav_visible is True
    assert client.state.view.section == "admin"


def test_logout_resets_state():
    client, _ = make_client(lambda request: httpx.Response(200, json=[]))
    client.attempt_admin_login(PASSCODE)
    client.set_filter("Decor")
    client.set_search_term("lamp")

    client.logout()

    assert client.state.view.section == "shop"
    assert client.state.view.admin_nav_visible is False
    assert client.state.active_category == "all"
    assert client.state.search_term == ""


def test_image_root_keeps_ipv6_brackets():
    assert image_root_for("http://[::1]:3000/") == "http://[::1]:3000"


def test_delete_declined_without_confirmer():
    """Test a client built without a confirmer never deletes."""
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"message": "Deleted"})

    http = httpx.Client(base_url="http://shop.test", transport=httpx.MockTransport(handler))
    client = StorefrontClient(http=http, passcode=PASSCODE)

    assert client.delete_listing(1) is False
    assert calls == []
