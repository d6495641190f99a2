from prometheus_client import Counter, Histogram


HTTP_REQUESTS_TOTAL = Counter(
    "cafe_http_requests_total",
    "Total HTTP requests",
    ["service", "method", "path", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "cafe_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["service", "method", "path"],
)

PRODUCTS_OPERATIONS_TOTAL = Counter(
    "cafe_products_operations_total",
    "Catalog store operations",
    ["service", "operation", "status"],
)

ORDERS_SERVICE_OPERATIONS_TOTAL = Counter(
    "cafe_orders_service_operations_total",
    "Order mutation service operations",
    ["service", "operation", "status"],
)

DASHBOARD_QUERIES_TOTAL = Counter(
    "cafe_dashboard_queries_total",
    "Dashboard aggregate queries",
    ["service", "query", "status"],
)

COMMANDS_TOTAL = Counter(
    "cafe_commands_total",
    "Commands executed through the command table",
    ["service", "command", "status"],
)
