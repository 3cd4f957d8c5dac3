from .base import *
from .base import env

DEBUG = env.bool("DJANGO_DEBUG", True)
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="local-dev-4nRk2QpZ8yTq1LmVb7XcW3sHf9JdUe6GoAi0YtPz5KrMw",
)
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]
