# Gunicorn settings for running the validation API in a container.
# Logs go to stdout/stderr so the container runtime collects them.

wsgi_app = "datecheck.main:app"
bind = "0.0.0.0:10000"
worker_class = "uvicorn.workers.UvicornWorker"
workers = 2
timeout = 30

accesslog = "-"
errorlog = "-"
loglevel = "info"
capture_output = True
