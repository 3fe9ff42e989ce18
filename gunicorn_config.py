"""
Gunicorn configuration file for the School LMS Django application

Usage:
    gunicorn -c gunicorn_config.py schoollms.wsgi:application

Or with systemd service:
    ExecStart=/path/to/venv/bin/gunicorn -c /path/to/project/gunicorn_config.py schoollms.wsgi:application
"""

import multiprocessing

from decouple import config

# Server socket
bind = config('GUNICORN_BIND', default="unix:/var/run/gunicorn/schoollms.sock")
# Alternative: If using TCP socket
# GUNICORN_BIND=127.0.0.1:8000

# Worker processes
workers = config('GUNICORN_WORKERS', default=multiprocessing.cpu_count() * 2 + 1, cast=int)
worker_class = "sync"
timeout = config('GUNICORN_TIMEOUT', default=30, cast=int)
keepalive = 2

# Logging
accesslog = config('GUNICORN_ACCESS_LOG', default="/var/log/gunicorn/schoollms_access.log")
errorlog = config('GUNICORN_ERROR_LOG', default="/var/log/gunicorn/schoollms_error.log")
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "schoollms"

# Server mechanics
daemon = False
pidfile = "/var/run/gunicorn/schoollms.pid"

# Preload app
preload_app = True

# Restart workers after this many requests
max_requests = 1000
max_requests_jitter = 50

graceful_timeout = 30
