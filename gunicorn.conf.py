import os

bind = os.getenv("BIND", "0.0.0.0:8080")
workers = int(os.getenv("WEB_CONCURRENCY", "2"))          # bump to 3–4 if CPU allows
threads = int(os.getenv("GUNICORN_THREADS", "4"))
# must outlast one oEmbed call plus one page fetch
timeout = 30
graceful_timeout = 30
keepalive = 5
preload_app = True
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = "-"
