# 📄 File: celery_config.py
#
# 🧭 Purpose (Layman Explanation):
# Settings for the marketplace's background helper (Celery), which runs scheduled
# chores like ending expired featured spots and lapsed Pro memberships.
#
# 🧪 Purpose (Technical Summary):
# Celery configuration with Redis as broker and result backend, a single maintenance
# queue, environment-specific overrides and the beat schedule.
#
# 🔗 Dependencies:
# - celery, kombu
# - Redis server (message broker)
# - sprout.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - sprout/background_jobs/tasks/maintenance.py
# - celery worker / beat processes (celery -A celery_config worker -B)

from datetime import timedelta

from celery import Celery
from celery.schedules import crontab
from kombu import Queue

from sprout.shared.config.settings import get_settings

settings = get_settings()

# =============================================================================
# CELERY CONFIGURATION CLASS
# =============================================================================


class CeleryConfig:
    """
    Celery configuration class for the Sprout marketplace.

    Defines broker, serialization, queue and scheduling settings.
    """

    # =========================================================================
    # BROKER AND BACKEND SETTINGS
    # =========================================================================

    broker_url = settings.CELERY_BROKER_URL
    result_backend = settings.CELERY_RESULT_BACKEND

    broker_connection_retry_on_startup = True
    broker_connection_max_retries = 10
    broker_pool_limit = 10

    result_expires = timedelta(hours=24)

    # =========================================================================
    # TASK SETTINGS
    # =========================================================================

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]
    timezone = "UTC"
    enable_utc = True

    task_time_limit = 300
    task_soft_time_limit = 240
    task_acks_late = True
    task_reject_on_worker_lost = True
    worker_prefetch_multiplier = 1

    # =========================================================================
    # QUEUE DEFINITIONS
    # =========================================================================

    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue("maintenance", routing_key="maintenance"),
    )
    task_routes = {
        "sprout.background_jobs.tasks.maintenance.*": {"queue": "maintenance"},
    }

    # =========================================================================
    # PERIODIC TASKS (CELERY BEAT)
    # =========================================================================

    beat_schedule = {
        "expire-featured-listings": {
            "task": "sprout.background_jobs.tasks.maintenance.expire_featured_listings",
            "schedule": crontab(minute=0),
        },
        "expire-pro-subscriptions": {
            "task": "sprout.background_jobs.tasks.maintenance.expire_pro_subscriptions",
            "schedule": crontab(hour=3, minute=15),
        },
    }

    worker_max_tasks_per_child = 1000
    worker_log_color = True


# =============================================================================
# ENVIRONMENT-SPECIFIC CONFIGURATIONS
# =============================================================================

class DevelopmentCeleryConfig(CeleryConfig):
    worker_log_level = "DEBUG"


class ProductionCeleryConfig(CeleryConfig):
    worker_log_level = "INFO"
    worker_log_color = False
    worker_send_task_events = True
    task_send_sent_event = True


def get_celery_config() -> CeleryConfig:
    """Pick the configuration class for the current ENVIRONMENT."""
    config_map = {
        "development": DevelopmentCeleryConfig,
        "staging": ProductionCeleryConfig,
        "production": ProductionCeleryConfig,
    }
    return config_map.get(settings.ENVIRONMENT, DevelopmentCeleryConfig)()


# =============================================================================
# CELERY APPLICATION INSTANCE
# =============================================================================

app = Celery("sprout_backend")
app.config_from_object(get_celery_config())
app.autodiscover_tasks(["sprout.background_jobs.tasks"], related_name="maintenance")


if __name__ == "__main__":
    app.start()
