import os
import time
from datetime import datetime, timezone
from threading import Thread

import requests
import schedule
import uvicorn
from fastapi import FastAPI
from tenacity import retry, stop_after_attempt, wait_fixed

from shared.app_logging.logger import setup_logging

# Setup logging
logger = setup_logging("scheduler")

NEWS_ROUTER_URL = os.getenv("NEWS_ROUTER_URL", "http://news-router:8001")

REQUEST_TIMEOUT = float(os.getenv("SCHEDULER_HTTP_TIMEOUT", "120"))
REFRESH_MINUTES = int(os.getenv("SCHEDULER_REFRESH_MINUTES", "5"))
COUNTRIES = [c.strip().lower() for c in os.getenv("SCHEDULER_COUNTRIES", "us,gb,in").split(",") if c.strip()]


@retry(stop=stop_after_attempt(3), wait=wait_fixed(5), reraise=True)
def trigger_refresh(country: str):
    """Ask the news router for a fresh ingestion for one country."""
    url = f"{NEWS_ROUTER_URL}/news-router"
    logger.info(f"Triggering news refresh for {country} at {url}")
    response = requests.post(
        url,
        params={"country": country},
        json={"triggered_at": datetime.now(timezone.utc).isoformat()},
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    data = response.json()
    logger.info(f"News refresh for {country} returned {data.get('count', 0)} items.")
    return data


def refresh_job(countries=None):
    """Refresh every configured country; one failure does not stop the rest."""
    countries = COUNTRIES if countries is None else countries
    logger.info(f"Starting news refresh for {len(countries)} countries...")

    refreshed = 0
    for country in countries:
        try:
            trigger_refresh(country)
            refreshed += 1
        except Exception:
            logger.exception(f"Failed to refresh news for {country}")

    logger.info(f"News refresh completed: {refreshed}/{len(countries)} countries.")
    return refreshed


def run_schedule():
    """Run the scheduler."""
    schedule.every(REFRESH_MINUTES).minutes.do(refresh_job)

    while True:
        schedule.run_pending()
        time.sleep(1)


# FastAPI app for health checks
app = FastAPI()


@app.get("/health")
def health_check():
    return {"status": "ok", "countries": COUNTRIES, "refresh_minutes": REFRESH_MINUTES}


def run_fastapi():
    """Run the FastAPI app."""
    uvicorn.run(app, host="0.0.0.0", port=8005)


if __name__ == "__main__":
    # Run the scheduler in a separate thread
    scheduler_thread = Thread(target=run_schedule, daemon=True)
    scheduler_thread.start()

    # Run the FastAPI app in the main thread
    run_fastapi()
