MAX_STAY = 30
MAX_GUESTS = 10
MAX_RECENT_SEARCHES = 5
FEATURED_REVIEWS_LIMIT = 6
FEATURED_MIN_RATING = 4
DEFAULT_PAYMENT_METHOD = "Pay At Hotel"
DEFAULT_PAYMENT_TIMEOUT_SECONDS = 5.0
DEFAULT_REGION = "ap-south-1"
