# Application
wsgi_app = "channelhub:create_app()"

# Bind & workers
bind = "0.0.0.0:8000"
workers = 2  # override with env GUNICORN_WORKERS
threads = 4  # requests block on hashing and media uploads
timeout = 60  # above MEDIA_UPLOAD_TIMEOUT
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = "info"  # override with env LOG_LEVEL

# Proxy headers
forwarded_allow_ips = "*"
proxy_protocol = False
