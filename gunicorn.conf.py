# gunicorn.conf.py
"""
Gunicorn configuration for the catalogo HTTP API.

Handles HTTP requests through catalogo.wsgi. WebSocket connections
(/ws/consolidated-orders/) are served by Daphne from catalogo.asgi.
"""
import multiprocessing
import os

# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"
backlog = 2048

# Worker processes
workers = int(os.environ.get('WEB_CONCURRENCY', multiprocessing.cpu_count() * 2 + 1))
worker_class = 'sync'
timeout = 60
keepalive = 5
max_requests = 1000
max_requests_jitter = 50

wsgi_app = 'catalogo.wsgi:application'
preload_app = True

# Logging
accesslog = '-'
errorlog = '-'
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'

proc_name = 'catalogo-gunicorn'
graceful_timeout = 30

# TLS terminates at the load balancer
forwarded_allow_ips = '*'
secure_scheme_headers = {
    'X-FORWARDED-PROTO': 'https',
}
