"""Constant tables used by recipe fetching and parsing."""

from recipe_harvester.app.services.url_parsing.models import RecipeCategory, SiteSelectors

# Each route receives the percent-encoded target URL in place of {url}.
DEFAULT_PROXY_ROUTES = [
    "https://api.allorigins.win/raw?url={url}",
    "https://cors-anywhere.herokuapp.com/{url}",
    "https://api.codetabs.com/v1/proxy?quest={url}",
    "https://thingproxy.freeboard.io/fetch/{url}",
]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Lower-cased substrings of pages served in place of the real content.
BLOCK_PAGE_SIGNATURES = ("access denied", "403 forbidden", "rate limit exceeded")
RATE_LIMIT_SIGNATURES = ("rate limit exceeded",)

CATEGORY_MAP = {
    "breakfast": RecipeCategory.BREAKFAST,
    "lunch": RecipeCategory.LUNCH,
    "dinner": RecipeCategory.DINNER,
    "dessert": RecipeCategory.DESSERT,
    "snack": RecipeCategory.SNACK,
    "snacks": RecipeCategory.SNACK,
    "appetizer": RecipeCategory.APPETIZER,
    "appetizers": RecipeCategory.APPETIZER,
    "main course": RecipeCategory.MAIN,
    "main dish": RecipeCategory.MAIN,
    "entree": RecipeCategory.MAIN,
    "side dish": RecipeCategory.SIDE,
    "sides": RecipeCategory.SIDE,
    "soup": RecipeCategory.SOUP,
    "salad": RecipeCategory.SALAD,
    "beverage": RecipeCategory.BEVERAGE,
    "drink": RecipeCategory.BEVERAGE,
    "drinks": RecipeCategory.BEVERAGE,
}

# Checked in order against the URL path when a page has no category element.
URL_CATEGORY_KEYWORDS = [
    ("breakfast", RecipeCategory.BREAKFAST),
    ("lunch", RecipeCategory.LUNCH),
    ("dinner", RecipeCategory.DINNER),
    ("dessert", RecipeCategory.DESSERT),
    ("snack", RecipeCategory.SNACK),
]

BUDGET_BYTES = "budget_bytes"

BUDGET_BYTES_SELECTORS = SiteSelectors(
    title=["h1.entry-title", "h1.recipe-title", ".recipe-header h1"],
    image=[".recipe-image img", ".entry-content img", ".wp-post-image"],
    ingredients=[".recipe-ingredients li", ".ingredients li", ".ingredient-list li"],
    instructions=[
        ".recipe-instructions li",
        ".instructions li",
        ".instruction-list li",
        ".recipe-directions li",
    ],
    prep_time=[".prep-time", ".recipe-prep-time", '[itemprop="prepTime"]'],
    cook_time=[".cook-time", ".recipe-cook-time", '[itemprop="cookTime"]'],
    servings=[".servings", ".recipe-servings", '[itemprop="recipeYield"]'],
    category=[".recipe-category", ".category", ".entry-category"],
)

DEFAULT_SUPPORTED_SITES = {"budgetbytes.com": BUDGET_BYTES}
DEFAULT_SITE_SELECTORS = {BUDGET_BYTES: BUDGET_BYTES_SELECTORS}
