# e2e/casebook/selectors/shop_selectors.py

HOME_PATH = "/index.php"

SEARCH_INPUT = "#search_query_top"
SEARCH_BUTTON = "button[name='submit_search']"
SEARCH_HEADING = "h1"

PRODUCT_CONTAINER = ".product-container"
ADD_TO_CART_BUTTON = ".ajax_add_to_cart_button"
CART_CONFIRMATION = ".layer_cart_overlay"
CART_QUANTITY = ".ajax_cart_quantity"

NO_RESULTS_ALERT = ".alert-warning"

# 検証メッセージ：上から順に、最初に見えたもの
VALIDATION_MESSAGE_SELECTORS = [
    ".alert-warning",
    ".alert-danger",
    ".alert.alert-warning",
    ".alert.alert-danger",
    ".error-message",
    ".validation-message",
    "[class*='alert']",
    "[class*='error']",
    "[class*='message']",
]

# どのセレクタにも当たらない時、body 全文にこれが含まれていれば body を返す
VALIDATION_BODY_PATTERNS = [
    r"no results",
    r"not found",
    r"error",
    r"warning",
    r"invalid",
]
