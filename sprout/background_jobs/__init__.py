# 📄 File: sprout/background_jobs/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Chores the marketplace runs on a timer, away from web requests.
#
# 🧪 Purpose (Technical Summary):
# Celery task package; the Celery app and beat schedule live in celery_config.py.
