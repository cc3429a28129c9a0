"""Application constants."""

USER_AGENT = "covid-stats/1.0 (+daily-report aggregation)"
STAGES = (
    "fetch",
    "aggregate",
)
GRANULARITIES = ("country", "region", "place")
COUNT_KEYS = ("cases", "deaths", "recoveries")
REPORT_DATE_FORMAT = "%m-%d-%Y"
EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "granularity",
    "report_date",
    "event",
    "status",
    "rows_in",
    "rows_out",
    "locations",
    "duration_ms",
    "error_code",
    "message",
)
