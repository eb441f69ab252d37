"""Gunicorn settings for the Micropub endpoint.

Loaded by server.main.MicropubApplication, which also supplies
logconfig_dict from server.main.logging_config() so Gunicorn keeps the
application's log handlers and level.
"""

bind = "0.0.0.0:5000"

workers = 2
worker_class = "sync"
timeout = 30
keepalive = 2

accesslog = "-"
errorlog = "-"
loglevel = "info"
access_log_format = '%(h)s %(t)s "%(r)s" %(s)s %(b)s "%(a)s" %(D)s'
capture_output = True

# Request limits
limit_request_line = 4096
limit_request_fields = 100


def when_ready(server):
    server.log.info("Micropub endpoint listening on %s", bind)


def worker_abort(worker):
    worker.log.error("Micropub worker aborted (request exceeded %ss timeout?)", timeout)
