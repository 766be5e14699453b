"""
Storefront client: keeps a local copy of the catalog in step with the API.

Every mutation (create, delete) goes to the server and is followed by a full
re-fetch of the catalog. Filtering and searching only re-render the local
copy. Failures leave the client with an empty catalog and a re-enabled form,
and are reported through the notifier.

Overlapping refreshes are not sequenced: whichever response arrives last
wins.
"""
import logging
from typing import Any, Callable, Dict, Optional, Tuple

import httpx

from app.config import get_settings
from app.storefront.render import RenderedCatalog, render_views
from app.storefront.state import AppState, ADMIN, SHOP, check_admin_passcode

logger = logging.getLogger(__name__)

FORM_FIELDS = ("name", "category", "condition", "price", "desc")

# (filename, content, content type), as accepted by httpx ``files=``
ImageUpload = Tuple[str, Any, str]


def image_root_for(page_url: str) -> str:
    """Origin (scheme, host and port) of the page the client runs on."""
    url = httpx.URL(page_url)
    return f"{url.scheme}://{url.netloc.decode('ascii')}"


def _log_notification(message: str) -> None:
    logger.warning(message)


def _decline(message: str) -> bool:
    return False


class StorefrontClient:
    """
    Client-side sync engine for the storefront.

    Args:
        base_url: URL of the page/API origin
        http: Optional preconfigured httpx client (e.g. a TestClient)
        notify: Blocking user notification, logs a warning by default
        confirm: Yes/no confirmation; without one, deletes are declined
        passcode: Admin passcode, taken from settings if omitted
    """

    API_PATH = "/api/products"

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        http: Optional[httpx.Client] = None,
        notify: Callable[[str], None] = None,
        confirm: Callable[[str], bool] = None,
        passcode: str = None
    ):
        self.http = http if http is not None else httpx.Client(base_url=base_url)
        self.image_root = image_root_for(str(self.http.base_url) if http is not None else base_url)
        self.notify = notify or _log_notification
        self.confirm = confirm or _decline
        self.passcode = passcode if passcode is not None else get_settings().ADMIN_PASSCODE
        self.state = AppState()
        self.rendered = RenderedCatalog()

    def render(self) -> RenderedCatalog:
        self.rendered = render_views(
            self.state.catalog,
            self.state.active_category,
            self.state.search_term,
            self.image_root
        )
        return self.rendered

    def refresh(self) -> bool:
        """
        Fetch the whole catalog and re-render.

        Returns:
            True if a product list was received, False otherwise
        """
        try:
            response = self.http.get(self.API_PATH)
            data = response.json()
        except httpx.HTTPError as e:
            return self._refresh_failed(f"Network error connecting to API: {e}")
        except ValueError as e:
            return self._refresh_failed(f"Malformed catalog response: {e}")

        if not response.is_success or not isinstance(data, list):
            return self._refresh_failed(f"Server sent an error instead of data: {data}")

        self.state.replace_catalog(data)
        self.render()
        return True

    def _refresh_failed(self, message: str) -> bool:
        logger.error(message)
        self.state.clear_catalog(message)
        self.render()
        self.notify(message)
        return False

    def set_filter(self, category: str) -> RenderedCatalog:
        self.state.set_filter(category)
        return self.render()

    def set_search_term(self, term: str) -> RenderedCatalog:
        self.state.set_search_term(term)
        return self.render()

    def create_listing(self, fields: Dict[str, str], image: Optional[ImageUpload]) -> bool:
        """
        Submit the add-listing form.

        The form keeps its values on failure and is cleared on success. The
        submit control is restored in every case.
        """
        if not image:
            self.notify("Please select an image.")
            return False

        form = self.state.form
        form.fields = dict(fields)
        form.set_busy()
        try:
            response = self.http.post(
                self.API_PATH,
                data={k: fields.get(k) or "" for k in FORM_FIELDS},
                files={"image": image}
            )
            if not response.is_success:
                self.notify("Upload failed: " + self._error_message(response))
                return False

            self.notify("Item successfully listed!")
            form.clear()
            self.refresh()
            self.state.view.show(SHOP)
            return True
        except httpx.HTTPError as e:
            logger.error(f"Network error during upload: {e}")
            self.notify("Network error during upload.")
            return False
        finally:
            form.restore()

    def delete_listing(self, product_id: int) -> bool:
        """Delete a product after confirmation, then refresh."""
        if not self.confirm("Delete this item?"):
            return False

        try:
            response = self.http.delete(f"{self.API_PATH}/{product_id}")
        except httpx.HTTPError as e:
            logger.error(f"Delete of product #{product_id} failed: {e}")
            self.notify("Could not delete item.")
            return False

        if not response.is_success:
            logger.error(f"Delete of product #{product_id} failed: {response.text}")
            self.notify("Could not delete item.")
            return False

        self.refresh()
        return True

    def attempt_admin_login(self, entered: Optional[str]) -> bool:
        """
        Reveal the admin section if the passcode matches.

        A cancelled prompt (None) changes nothing; a wrong answer is denied
        and the current section stays visible.
        """
        result = check_admin_passcode(entered, self.passcode)
        if result is None:
            return False
        if not result:
            self.notify("Access Denied.")
            return False

        self.state.view.admin_nav_visible = True
        self.state.view.show(ADMIN)
        return True

    def show_section(self, section: str) -> None:
        self.state.view.show(section)

    def logout(self) -> None:
        """Drop all local state and start over from a fresh catalog fetch."""
        self.state = AppState()
        self.rendered = RenderedCatalog()
        self.refresh()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return "Unknown error"
        if isinstance(body, dict) and body.get("error"):
            return body["error"]
        return "Unknown error"

    def close(self) -> None:
        self.http.close()
