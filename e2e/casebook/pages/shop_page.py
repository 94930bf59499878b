# e2e/casebook/pages/shop_page.py
from __future__ import annotations

import random
import re

from playwright.sync_api import Page, TimeoutError as PlaywrightTimeoutError

from casebook.core.config import RunConfig
from casebook.core.errors import ActionUnavailable
from casebook.core.logs import get_logger
from casebook.core.nav import goto, safe_click, safe_fill
from casebook.core.waits import visible_within, wait_until_count
from casebook.selectors import shop_selectors as S

log = get_logger(__name__)


class ShopPage:
    """
    Playwright implementation of the ApplicationActions verbs for the demo
    shop. One instance per unit (per page).
    """

    def __init__(self, page: Page, config: RunConfig):
        self.page = page
        self.config = config
        self.timeout_ms = config.action_timeout_ms

        self.search_input = page.locator(S.SEARCH_INPUT)
        self.search_button = page.locator(S.SEARCH_BUTTON)
        self.search_heading = page.locator(S.SEARCH_HEADING).first
        self.products = page.locator(S.PRODUCT_CONTAINER)
        self.cart_confirmation = page.locator(S.CART_CONFIRMATION)
        self.cart_quantity = page.locator(S.CART_QUANTITY)
        self.no_results = page.locator(S.NO_RESULTS_ALERT)

    def _wait_loaded(self) -> None:
        try:
            self.page.wait_for_load_state("networkidle", timeout=self.config.nav_timeout_ms)
        except PlaywrightTimeoutError:
            # networkidle に到達しないサイトもあるので domcontentloaded で妥協
            self.page.wait_for_load_state("domcontentloaded")

    def open(self) -> None:
        goto(self.page, self.config.base_url, S.HOME_PATH)
        self._wait_loaded()

    def search(self, value: str) -> None:
        safe_fill(self.search_input, value, timeout_ms=self.timeout_ms, name="search box")
        safe_click(self.search_button, timeout_ms=self.timeout_ms, name="search button")
        self._wait_loaded()

    def is_results_displayed(self) -> bool:
        return visible_within(self.search_heading, self.timeout_ms)

    def result_count(self) -> int:
        return self.products.count()

    def add_random_result_to_cart(self) -> None:
        n = wait_until_count(self.products, 1, timeout_sec=self.timeout_ms / 1000)
        if n == 0:
            raise ActionUnavailable("add to cart: no products in results", self.timeout_ms)

        idx = random.randrange(n) if n > 1 else 0
        product = self.products.nth(idx)
        log.debug("adding product to cart", index=idx, of=n)

        # hover で「カートに入れる」ボタンが出る
        try:
            product.hover(timeout=self.timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ActionUnavailable("hover product", self.timeout_ms) from e

        safe_click(product.locator(S.ADD_TO_CART_BUTTON), timeout_ms=self.timeout_ms, name="add to cart")

        if not visible_within(self.cart_confirmation, self.timeout_ms):
            raise ActionUnavailable("cart confirmation", self.timeout_ms)

    def is_cart_confirmed(self) -> bool:
        return visible_within(self.cart_confirmation, self.timeout_ms)

    def cart_count(self) -> int:
        try:
            txt = (self.cart_quantity.first.text_content(timeout=self.timeout_ms) or "").strip()
        except PlaywrightTimeoutError:
            return 0
        m = re.search(r"\d+", txt)
        return int(m.group()) if m else 0

    def is_no_results_shown(self) -> bool:
        return visible_within(self.no_results, self.timeout_ms)

    def validation_message(self) -> str:
        for sel in S.VALIDATION_MESSAGE_SELECTORS:
            loc = self.page.locator(sel).first
            try:
                if loc.is_visible():
                    return (loc.text_content() or "").strip()
            except Exception:
                continue

        try:
            body = self.page.text_content("body") or ""
        except Exception:
            return ""
        for pat in S.VALIDATION_BODY_PATTERNS:
            if re.search(pat, body, flags=re.IGNORECASE):
                return body
        return ""
