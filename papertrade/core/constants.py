"""
Core constants and limits.

Defines simulation-wide constants and resource limits that keep the
market model and the ledger within sane bounds.
"""

# Price Model
PRICE_FLOOR = 0.01  # Prices never drop below one cent
PRICE_HISTORY_CAP = 100  # Oldest entries are evicted past this length
TRADING_DAYS_PER_YEAR = 252  # Used to annualise volatility estimates
DEFAULT_VOLATILITY = 0.015
BACKFILL_HISTORY_POINTS = 30

# Sentiment
SENTIMENT_MIN = -1.0
SENTIMENT_MAX = 1.0
MARKET_NEWS_DAMPENER = 0.7  # Market-wide stories hit every instrument at 70%
NEWS_FEED_SIZE = 10  # Most recent stories kept for display

# News Generation
DEFAULT_NEWS_INTERVAL_SECONDS = 90.0
COMPANY_NEWS_PROBABILITY = 0.50
SECTOR_NEWS_PROBABILITY = 0.25  # Market-wide news takes the remainder
POSITIVE_NEWS_PROBABILITY = 0.50
TEXT_GENERATOR_TIMEOUT_SECONDS = 3.0
HEADLINE_CACHE_TTL_SECONDS = 60.0
TEXT_GENERATOR_BACKOFF_SECONDS = 30.0  # Templates only after a generator failure

# Ledger Limits
DEFAULT_INITIAL_BALANCE = 500.0
MAX_ORDER_QUANTITY = 100  # Per-order share cap for market orders
MIN_INITIAL_BALANCE = 1.0
MAX_INITIAL_BALANCE = 100000000.0

# Limit Orders
LIMIT_ORDER_MIN_QUANTITY = 1
LIMIT_ORDER_MAX_QUANTITY = 100

# Scheduler
DEFAULT_TICK_INTERVAL_SECONDS = 1.0

# Symbols
MAX_SYMBOL_LENGTH = 5

DEFAULT_SECTORS = (
    "Technology",
    "Healthcare",
    "Financial Services",
    "Consumer Goods",
    "Energy",
    "Telecommunications",
    "Real Estate",
    "Utilities",
    "Materials",
    "Industrials",
)

# (symbol, company name, sector, reference price)
DEFAULT_UNIVERSE = (
    ("AAPL", "Apple Inc.", "Technology", 187.30),
    ("MSFT", "Microsoft Corporation", "Technology", 340.17),
    ("GOOGL", "Alphabet Inc.", "Technology", 134.99),
    ("AMZN", "Amazon.com, Inc.", "Consumer Services", 165.82),
    ("META", "Meta Platforms, Inc.", "Technology", 431.15),
    ("TSLA", "Tesla, Inc.", "Automotive", 178.18),
    ("NFLX", "Netflix, Inc.", "Entertainment", 588.70),
    ("NVDA", "NVIDIA Corporation", "Technology", 877.22),
    ("JPM", "JPMorgan Chase & Co.", "Financial Services", 186.89),
    ("DIS", "The Walt Disney Company", "Entertainment", 111.67),
)
