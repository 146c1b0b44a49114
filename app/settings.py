import os

db_url = os.environ.get("DB_URL", "sqlite://:memory:")
auth_service_url = os.environ.get("AUTH_SERVICE_URL", "http://localhost:8000")
internal_api_token = os.environ.get("INTERNAL_API_TOKEN", "dev-internal-token")
allowed_staff_domains = {
    d.strip().lower()
    for d in os.environ.get("ALLOWED_STAFF_DOMAINS", "yourcompany.com").split(",")
    if d.strip()
}
generate_schemas = os.environ.get("GENERATE_SCHEMAS", "true").lower() == "true"
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
