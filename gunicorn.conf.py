# gunicorn.conf.py
# run: gunicorn -c gunicorn.conf.py
import os

wsgi_app = "landcost.main:app"
bind = f"0.0.0.0:{os.getenv('PORT', '8000')}"
workers = int(os.getenv("WEB_CONCURRENCY", "2"))
worker_class = "uvicorn.workers.UvicornWorker"

# reports are computed per request; keep workers short-lived
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
max_requests = 500
max_requests_jitter = 50

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
