# xcollab/metrics.py
from prometheus_client import Counter, Histogram, CollectorRegistry

# Dedicated registry so reloads and repeated imports do not collide
REGISTRY = CollectorRegistry(auto_describe=True)

LLM_REQUESTS = Counter(
    "llm_requests_total",
    "Number of LLM requests",
    ["outcome"],
    registry=REGISTRY,
)

LLM_LATENCY = Histogram(
    "llm_latency_seconds",
    "Latency of LLM requests in seconds",
    registry=REGISTRY,
)

DB_QUERIES = Counter(
    "db_queries_total",
    "Number of hackathon data store queries",
    ["query", "outcome"],
    registry=REGISTRY,
)

DB_LATENCY = Histogram(
    "db_query_latency_seconds",
    "Latency of hackathon data store queries in seconds",
    ["query"],
    registry=REGISTRY,
)
