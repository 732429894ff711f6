# gunicorn.conf.py
# Run with: gunicorn -c gunicorn.conf.py kronos.main:app
import multiprocessing, os

bind = f"0.0.0.0:{os.getenv('PORT','5000')}"
# Pure in-process math; a few sync workers are plenty
workers = int(os.getenv("WEB_CONCURRENCY", max(2, multiprocessing.cpu_count() // 2)))
threads = 1
worker_class = "sync"
timeout = 30
graceful_timeout = 15
keepalive = 2
accesslog = "-"   # stdout
errorlog = "-"    # stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()

access_log_format = (
    '%(h)s - "%(r)s" %(s)s %(b)s "%(a)s" '
    'req_id:%({X-Request-ID}i)s rt:%(L)s'
)
