from locust import HttpUser, task, between, events
import random
import requests
import logging
from requests.exceptions import RequestException

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Run against a seeded database (`orderbench-seed --reset`); ids below assume the default seed sizes.
USER_IDS = range(1, 1002)
PRODUCT_IDS = range(1, 2001)
SEARCH_TERMS = ["widget", "sensor", "turbo", "valve", "nano"]
SORTS = ["recent", "price_asc", "price_desc"]


def fetch_status(host):
    """Log which engine the target is running on, plus its row counts."""
    try:
        response = requests.get(f"{host}/", timeout=5)
        if response.status_code == 200:
            data = response.json()
            logger.info(f"Target: {data['driver']} {data['database_version']} stats={data['stats']}")
        else:
            logger.error(f"Status check failed: {response.status_code} - {response.text}")
    except RequestException as e:
        logger.error(f"Error reading status: {str(e)}")
        raise


# Read:Write ratio = 80:20 (weights 8 and 2). The catalog read path dominates real
# traffic; the order write path is where engines differ under row contention.

@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    host = environment.host or "http://127.0.0.1:8000"
    fetch_status(host)


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    host = environment.host or "http://127.0.0.1:8000"
    fetch_status(host)


class WebsiteUser(HttpUser):
    wait_time = between(0.5, 2.0)

    @task(8)
    def list_products(self):
        params = {"sort": random.choice(SORTS), "per_page": random.choice([10, 20, 50]), "page": random.randint(1, 5)}
        if random.random() < 0.5:
            params["search"] = random.choice(SEARCH_TERMS)
        if random.random() < 0.3:
            low = random.randint(5, 200)
            params["min_price"] = low
            params["max_price"] = low + random.randint(10, 300)
        with self.client.get("/products/", params=params, name="GET /products", catch_response=True) as resp:
            if resp.status_code != 200:
                resp.failure(f"unexpected status {resp.status_code}")

    @task(2)
    def place_order(self):
        payload = {
            "user_id": random.choice(USER_IDS),
            "product_id": random.choice(PRODUCT_IDS),
            "quantity": random.randint(1, 3),
        }
        with self.client.post("/orders/", json=payload, name="POST /orders/", catch_response=True) as resp:
            # 409 is an expected business outcome once a product sells out
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"order creation unexpected status {resp.status_code}")
